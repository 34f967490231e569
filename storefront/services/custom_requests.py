"""Custom design request intake"""

import logging

from ..core.errors import ApiError
from ..core.status import CustomRequestStatus
from ..models.custom_request import CreateCustomRequestRequest, CreateCustomRequestResponse
from .backend import BackendClient, BackendError
from .notifications import SlackNotifier
from .references import generate_reference, is_non_empty
from .uploads import MAX_FILE_COUNT, is_valid_upload_group_id

logger = logging.getLogger(__name__)

REQUEST_NUMBER_PREFIX = "EUY-CR"
FILE_OWNER_TYPE = "custom_request"


def validate_custom_request(request: CreateCustomRequestRequest) -> dict[str, str]:
    field_errors: dict[str, str] = {}

    if not is_non_empty(request.requester_name):
        field_errors["requester_name"] = "Contact name is required."
    if not is_non_empty(request.whatsapp):
        field_errors["whatsapp"] = "WhatsApp number is required."
    if not [kind for kind in request.product_types if is_non_empty(kind)]:
        field_errors["product_types"] = "Choose at least one product type."
    if request.quantity_estimate < 1:
        field_errors["quantity_estimate"] = "Quantity must be at least 1."
    if request.upload_group_id is not None and not is_valid_upload_group_id(
        request.upload_group_id
    ):
        field_errors["upload_group_id"] = "upload_group_id is invalid."

    if len(request.files) > MAX_FILE_COUNT:
        field_errors["files"] = f"At most {MAX_FILE_COUNT} files are allowed."

    for index, file in enumerate(request.files):
        for name in ("bucket", "path", "original_name", "mime_type"):
            if not is_non_empty(getattr(file, name)):
                field_errors[f"files.{index}.{name}"] = f"{name} is required."
        if file.size_bytes <= 0:
            field_errors[f"files.{index}.size_bytes"] = "size_bytes is invalid."

    return field_errors


class CustomRequestService:
    """Stores custom design requests together with their uploaded files"""

    def __init__(self, backend: BackendClient, notifier: SlackNotifier):
        self.backend = backend
        self.notifier = notifier

    async def submit(self, request: CreateCustomRequestRequest) -> CreateCustomRequestResponse:
        if is_non_empty(request.company_website):
            raise ApiError(
                status_code=400,
                code="SPAM_DETECTED",
                message="The request could not be processed.",
                field_errors={"company_website": "Honeypot field was filled in."},
            )

        field_errors = validate_custom_request(request)
        if field_errors:
            raise ApiError(
                status_code=400,
                code="VALIDATION_ERROR",
                message="Request values are invalid.",
                field_errors=field_errors,
            )

        org_name = (request.org_name or "").strip() or None
        row = await self.backend.insert_custom_request({
            "request_number": generate_reference(REQUEST_NUMBER_PREFIX),
            "requester_name": request.requester_name.strip(),
            "whatsapp": request.whatsapp.strip(),
            "org_name": org_name,
            "upload_group_id": (request.upload_group_id or "").strip() or None,
            "product_types": [kind.strip() for kind in request.product_types if is_non_empty(kind)],
            "quantity_estimate": request.quantity_estimate,
            "deadline_date": request.deadline_date.isoformat() if request.deadline_date else None,
            "notes": (request.notes or "").strip() or None,
            "status": CustomRequestStatus.PENDING.value,
        })

        if request.files:
            await self._insert_files(row["id"], request)

        await self.notifier.send(
            "\n".join([
                f"NEW CUSTOM REQUEST - {row['request_number']}",
                f"Requester: {request.requester_name.strip()}",
                f"Org: {org_name or '-'}",
                f"Quantity: {request.quantity_estimate:,}",
                f"Admin: /admin/custom-requests/{row['id']}",
            ])
        )

        logger.info(f"Custom request {row['request_number']} created with {len(request.files)} files")

        return CreateCustomRequestResponse(
            request_id=row["id"],
            request_number=row["request_number"],
        )

    async def _insert_files(self, request_id: str, request: CreateCustomRequestRequest) -> None:
        rows = [
            {
                "owner_type": FILE_OWNER_TYPE,
                "owner_id": request_id,
                **file.model_dump(),
            }
            for file in request.files
        ]
        try:
            await self.backend.insert_files(rows)
        except BackendError:
            logger.error(f"File rows for custom request {request_id} failed - deleting request")
            try:
                await self.backend.delete_custom_request(request_id)
            except BackendError as cleanup_error:
                logger.error(f"Could not delete custom request {request_id}: {cleanup_error}")
            raise

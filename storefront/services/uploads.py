"""Upload rules and signed upload URLs for custom design files"""

import re
import time
from datetime import datetime, timedelta, timezone
from typing import Optional

from ..core.errors import ApiError
from ..models.custom_request import PresignUploadRequest, PresignUploadResponse
from .backend import BackendClient
from .references import is_non_empty

MAX_FILE_COUNT = 10
MAX_FILE_SIZE_BYTES = 20 * 1024 * 1024
UPLOAD_URL_EXPIRES_SECONDS = 10 * 60
DOWNLOAD_URL_EXPIRES_SECONDS = 3 * 60

UPLOAD_GROUP_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,64}$")

ALLOWED_EXTENSIONS = ("png", "jpg", "jpeg", "pdf", "svg", "ai")
ALLOWED_MIME_TYPES = (
    "image/png",
    "image/jpeg",
    "application/pdf",
    "image/svg+xml",
    "application/postscript",
)


def get_file_extension(file_name: str) -> str:
    parts = file_name.lower().split(".")
    return parts[-1] if len(parts) > 1 else ""


def is_valid_upload_group_id(value: Optional[str]) -> bool:
    """Group ids are used verbatim as a storage path segment"""
    return isinstance(value, str) and bool(UPLOAD_GROUP_ID_PATTERN.fullmatch(value.strip()))


def sanitize_file_name(file_name: str) -> str:
    """Storage-safe name: spaces to underscores, other symbols dropped"""
    normalized = re.sub(r"\s+", "_", file_name.strip())
    normalized = re.sub(r"[^a-zA-Z0-9._-]", "", normalized)
    return (normalized or "file")[:120]


def validate_presign_request(request: PresignUploadRequest) -> dict[str, str]:
    field_errors: dict[str, str] = {}

    if not is_non_empty(request.upload_group_id):
        field_errors["uploadGroupId"] = "uploadGroupId is required."
    elif not is_valid_upload_group_id(request.upload_group_id):
        field_errors["uploadGroupId"] = "uploadGroupId may only contain letters, digits, - and _."
    if not is_non_empty(request.mime_type):
        field_errors["mimeType"] = "mimeType is required."
    elif request.mime_type not in ALLOWED_MIME_TYPES:
        field_errors["mimeType"] = "mimeType is not allowed."

    if request.size_bytes <= 0:
        field_errors["sizeBytes"] = "sizeBytes must be positive."
    elif request.size_bytes > MAX_FILE_SIZE_BYTES:
        field_errors["sizeBytes"] = (
            f"Files must be {MAX_FILE_SIZE_BYTES // (1024 * 1024)}MB or smaller."
        )

    extension = get_file_extension(request.file_name)
    if not is_non_empty(request.file_name):
        field_errors["fileName"] = "fileName is required."
    elif not extension:
        field_errors["fileName"] = "fileName must include an extension."
    elif extension not in ALLOWED_EXTENSIONS:
        field_errors["fileName"] = f"Extension not allowed ({', '.join(ALLOWED_EXTENSIONS)})."

    return field_errors


class UploadService:
    """Issues signed URLs for uploading and reviewing design files"""

    def __init__(self, backend: BackendClient, bucket: str):
        self.backend = backend
        self.bucket = bucket

    async def presign_upload(self, request: PresignUploadRequest) -> PresignUploadResponse:
        field_errors = validate_presign_request(request)
        if field_errors:
            raise ApiError(
                status_code=400,
                code="VALIDATION_ERROR",
                message="Request values are invalid.",
                field_errors=field_errors,
            )

        timestamp = int(time.time() * 1000)
        path = (
            f"custom-requests/{request.upload_group_id.strip()}/"
            f"{timestamp}_{sanitize_file_name(request.file_name)}"
        )

        signed_url = await self.backend.create_signed_upload_url(
            self.bucket,
            path,
            expires_in=UPLOAD_URL_EXPIRES_SECONDS,
            content_type=request.mime_type,
        )

        return PresignUploadResponse(
            bucket=self.bucket,
            path=path,
            signed_url=signed_url,
            expires_at=datetime.now(timezone.utc) + timedelta(seconds=UPLOAD_URL_EXPIRES_SECONDS),
        )

    async def signed_download_url(self, bucket: str, path: str) -> tuple[str, datetime]:
        signed_url = await self.backend.create_signed_download_url(
            bucket,
            path,
            expires_in=DOWNLOAD_URL_EXPIRES_SECONDS,
        )
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=DOWNLOAD_URL_EXPIRES_SECONDS)
        return signed_url, expires_at

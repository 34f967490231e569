"""Admin back-office routes"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..core.config import Settings
from ..core.errors import ApiError
from ..core.rate_limit import RateLimit
from ..core.status import (
    map_custom_status_to_group,
    map_order_status_to_group,
    resolve_custom_status_filter,
    resolve_custom_status_input,
    resolve_order_status_filter,
    resolve_order_status_input,
)
from ..models.admin import (
    NOT_NULL_PRODUCT_FIELDS,
    AdminCustomRequestDetail,
    AdminCustomRequestFile,
    AdminCustomRequestListItem,
    AdminListResponse,
    AdminOrderDetail,
    AdminOrderItem,
    AdminOrderListItem,
    AdminProductInput,
    AdminProductUpdate,
    DeleteResponse,
    LoginRequest,
    SignedUrlResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from ..models.product import Product
from ..security.admin_auth import (
    clear_admin_cookie,
    is_admin_password,
    require_admin,
    set_admin_cookie,
)
from ..services.backend import BackendClient, BackendError
from ..services.custom_requests import FILE_OWNER_TYPE
from ..services.uploads import UploadService
from .deps import get_app_settings, get_backend, get_upload_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])

admin_rate_limit = RateLimit("admin", limit=60, window_seconds=60)


def _invalid_status_filter() -> ApiError:
    return ApiError(
        status_code=400,
        code="INVALID_STATUS",
        message="Unknown status filter.",
        field_errors={"status": "Check the status filter value."},
    )


def _resolve_status_update(request: StatusUpdateRequest, resolver) -> str:
    if not request.status:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="status is required.",
            field_errors={"status": "status is required."},
        )
    resolved = resolver(request.status)
    if not resolved:
        raise ApiError(
            status_code=400,
            code="INVALID_STATUS",
            message="Unknown status.",
            field_errors={"status": "Check the status value."},
        )
    return resolved


def _next_offset(rows: list, limit: int, offset: int) -> Optional[int]:
    return offset + limit if len(rows) == limit else None


# ==================== Session ====================

@router.post(
    "/login",
    dependencies=[Depends(RateLimit("admin-login", limit=10, window_seconds=5 * 60))],
)
async def login(request: LoginRequest, settings: Settings = Depends(get_app_settings)):
    """Exchange the admin password for a session cookie"""
    if not settings.admin_configured:
        raise ApiError(
            status_code=500,
            code="ADMIN_CONFIG_MISSING",
            message="ADMIN_PASSWORD is not configured.",
        )

    if not request.password:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="Password is required.",
            field_errors={"password": "Enter the admin password."},
        )

    if not is_admin_password(settings, request.password):
        raise ApiError(status_code=401, code="UNAUTHORIZED", message="Incorrect password.")

    response = JSONResponse({"ok": True})
    set_admin_cookie(response, settings)
    logger.info("Admin signed in")
    return response


@router.post("/logout")
async def logout(settings: Settings = Depends(get_app_settings)):
    """Clear the admin session cookie"""
    response = JSONResponse({"ok": True})
    clear_admin_cookie(response, settings)
    return response


# ==================== Orders ====================

@router.get(
    "/orders",
    response_model=AdminListResponse[AdminOrderListItem],
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def list_orders(
    status: Optional[str] = Query(None, description="Status, group (NEW/IN_PROGRESS/DONE) or ALL"),
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    backend: BackendClient = Depends(get_backend),
):
    """List orders, newest first"""
    statuses = resolve_order_status_filter(status)
    if status and status != "ALL" and not statuses:
        raise _invalid_status_filter()

    rows = await backend.list_orders(statuses=statuses, limit=limit, offset=offset)
    items = [
        AdminOrderListItem(
            id=row["id"],
            order_number=row["order_number"],
            buyer_name=row["buyer_name"],
            status=row["status"],
            status_group=map_order_status_to_group(row["status"]),
            total_cents=row["total_cents"],
            created_at=row["created_at"],
        )
        for row in rows
    ]
    return AdminListResponse[AdminOrderListItem](
        items=items,
        next_offset=_next_offset(rows, limit, offset),
    )


@router.get(
    "/orders/{order_id}",
    response_model=AdminOrderDetail,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def get_order(order_id: str, backend: BackendClient = Depends(get_backend)):
    """Order with its lines"""
    order = await backend.get_order(order_id)
    if not order:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Order not found.")

    item_rows = await backend.list_order_items(order_id)
    items = [
        AdminOrderItem(
            id=item["id"],
            product_id=item.get("product_id"),
            product_name=(item.get("products") or {}).get("name"),
            product_slug=(item.get("products") or {}).get("slug"),
            quantity=item["quantity"],
            unit_price_cents=item["unit_price_cents"],
            custom_fee_cents=item.get("custom_fee_cents") or 0,
            options=item.get("options") or {},
            customization=item.get("customization"),
        )
        for item in item_rows
    ]

    return AdminOrderDetail(
        id=order["id"],
        order_number=order["order_number"],
        order_type=order.get("order_type") or "personal",
        buyer_name=order["buyer_name"],
        buyer_phone=order.get("buyer_phone"),
        buyer_email=order.get("buyer_email"),
        shipping_address=order.get("shipping_address"),
        notes=order.get("notes"),
        status=order["status"],
        status_group=map_order_status_to_group(order["status"]),
        subtotal_cents=order["subtotal_cents"],
        discount_cents=order.get("discount_cents") or 0,
        shipping_cents=order["shipping_cents"],
        total_cents=order["total_cents"],
        created_at=order["created_at"],
        items=items,
    )


@router.patch(
    "/orders/{order_id}/status",
    response_model=StatusUpdateResponse,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def update_order_status(
    order_id: str,
    request: StatusUpdateRequest,
    backend: BackendClient = Depends(get_backend),
):
    """Move an order to a new status"""
    resolved = _resolve_status_update(request, resolve_order_status_input)

    updated = await backend.update_order_status(
        order_id,
        resolved,
        updated_at=datetime.now(timezone.utc).isoformat(),
    )
    if not updated:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Order not found.")

    logger.info(f"Order {order_id} status -> {updated['status']}")
    return StatusUpdateResponse(
        id=updated["id"],
        status=updated["status"],
        status_group=map_order_status_to_group(updated["status"]),
        updated_at=updated.get("updated_at"),
    )


# ==================== Custom requests ====================

@router.get(
    "/custom-requests",
    response_model=AdminListResponse[AdminCustomRequestListItem],
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def list_custom_requests(
    status: Optional[str] = Query(None),
    limit: int = Query(20, ge=1, le=50),
    offset: int = Query(0, ge=0),
    backend: BackendClient = Depends(get_backend),
):
    """List custom requests, newest first"""
    statuses = resolve_custom_status_filter(status)
    if status and status != "ALL" and not statuses:
        raise _invalid_status_filter()

    rows = await backend.list_custom_requests(statuses=statuses, limit=limit, offset=offset)
    items = [
        AdminCustomRequestListItem(
            id=row["id"],
            request_number=row["request_number"],
            org_name=row.get("org_name"),
            requester_name=row["requester_name"],
            quantity_estimate=row.get("quantity_estimate"),
            status=row["status"],
            status_group=map_custom_status_to_group(row["status"]),
            created_at=row["created_at"],
        )
        for row in rows
    ]
    return AdminListResponse[AdminCustomRequestListItem](
        items=items,
        next_offset=_next_offset(rows, limit, offset),
    )


@router.get(
    "/custom-requests/{request_id}",
    response_model=AdminCustomRequestDetail,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def get_custom_request(request_id: str, backend: BackendClient = Depends(get_backend)):
    """Custom request with its uploaded files"""
    row = await backend.get_custom_request(request_id)
    if not row:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Custom request not found.")

    files = await backend.list_files(FILE_OWNER_TYPE, request_id)

    return AdminCustomRequestDetail(
        id=row["id"],
        request_number=row["request_number"],
        requester_name=row["requester_name"],
        whatsapp=row.get("whatsapp"),
        org_name=row.get("org_name"),
        product_types=row.get("product_types") or [],
        quantity_estimate=row.get("quantity_estimate"),
        deadline_date=row.get("deadline_date"),
        notes=row.get("notes"),
        status=row["status"],
        status_group=map_custom_status_to_group(row["status"]),
        created_at=row["created_at"],
        files=[AdminCustomRequestFile.model_validate(file) for file in files],
    )


@router.patch(
    "/custom-requests/{request_id}/status",
    response_model=StatusUpdateResponse,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def update_custom_request_status(
    request_id: str,
    request: StatusUpdateRequest,
    backend: BackendClient = Depends(get_backend),
):
    """Move a custom request to a new status"""
    resolved = _resolve_status_update(request, resolve_custom_status_input)

    updated = await backend.update_custom_request_status(
        request_id,
        resolved,
        updated_at=datetime.now(timezone.utc).isoformat(),
    )
    if not updated:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Custom request not found.")

    logger.info(f"Custom request {request_id} status -> {updated['status']}")
    return StatusUpdateResponse(
        id=updated["id"],
        status=updated["status"],
        status_group=map_custom_status_to_group(updated["status"]),
        updated_at=updated.get("updated_at"),
    )


# ==================== Products ====================

def _product_conflict(error: BackendError) -> ApiError:
    return ApiError(
        status_code=409,
        code="CONFLICT",
        message="The product conflicts with existing data.",
        field_errors={"slug": "Choose a different slug."} if "slug" in error.body else {},
    )


@router.post(
    "/products",
    status_code=201,
    response_model=Product,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def create_product(request: AdminProductInput, backend: BackendClient = Depends(get_backend)):
    """Add a product to the catalog"""
    try:
        product = await backend.insert_product(request.model_dump(mode="json"))
    except BackendError as e:
        if e.status_code == 409:
            raise _product_conflict(e) from e
        raise

    logger.info(f"Product {product.id} created ({product.slug})")
    return product


@router.patch(
    "/products/{product_id}",
    response_model=Product,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def update_product(
    product_id: str,
    request: AdminProductUpdate,
    backend: BackendClient = Depends(get_backend),
):
    """Change only the product fields present in the body"""
    changes = request.changes()
    if not changes:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="Nothing to update.",
            field_errors={"body": "Send at least one product field."},
        )

    null_fields = {
        name: f"{name} cannot be null."
        for name in NOT_NULL_PRODUCT_FIELDS
        if name in changes and changes[name] is None
    }
    if null_fields:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="Request values are invalid.",
            field_errors=null_fields,
        )

    try:
        product = await backend.update_product(product_id, changes)
    except BackendError as e:
        if e.status_code == 409:
            raise _product_conflict(e) from e
        raise
    if not product:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Product not found.")

    logger.info(f"Product {product_id} updated: {', '.join(sorted(changes))}")
    return product


@router.delete(
    "/products/{product_id}",
    response_model=DeleteResponse,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def delete_product(product_id: str, backend: BackendClient = Depends(get_backend)):
    """Remove a product from the catalog"""
    try:
        deleted = await backend.delete_product(product_id)
    except BackendError as e:
        if e.status_code == 409:
            raise _product_conflict(e) from e
        raise
    if not deleted:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Product not found.")

    logger.info(f"Product {product_id} deleted")
    return DeleteResponse()


# ==================== Files ====================

@router.get(
    "/files/signed-url",
    response_model=SignedUrlResponse,
    dependencies=[Depends(admin_rate_limit), Depends(require_admin)],
)
async def get_file_signed_url(
    path: Optional[str] = Query(None),
    bucket: Optional[str] = Query(None),
    settings: Settings = Depends(get_app_settings),
    uploads: UploadService = Depends(get_upload_service),
):
    """Short-lived download URL for an uploaded file"""
    bucket = bucket or settings.storage_bucket
    if not path:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="path is required.",
            field_errors={"path": "path is required."},
        )

    signed_url, expires_at = await uploads.signed_download_url(bucket, path)
    return SignedUrlResponse(signed_url=signed_url, expires_at=expires_at)

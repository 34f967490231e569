"""Admin back-office models"""

from datetime import date, datetime
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..core.status import StatusGroup
from .product import ProductColor

T = TypeVar("T")


class AdminModel(BaseModel):
    """Admin responses are camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LoginRequest(BaseModel):
    password: Optional[str] = None


class StatusUpdateRequest(BaseModel):
    status: Optional[str] = None


class AdminListResponse(AdminModel, Generic[T]):
    items: list[T]
    next_offset: Optional[int] = None


class AdminOrderListItem(AdminModel):
    id: str
    order_number: str
    buyer_name: str
    status: str
    status_group: StatusGroup
    total_cents: int
    created_at: datetime


class AdminOrderItem(AdminModel):
    id: str
    product_id: Optional[str] = None
    product_name: Optional[str] = None
    product_slug: Optional[str] = None
    quantity: int
    unit_price_cents: int
    custom_fee_cents: int = 0
    options: dict[str, str] = {}
    customization: Optional[dict] = None


class AdminOrderDetail(AdminModel):
    id: str
    order_number: str
    order_type: str
    buyer_name: str
    buyer_phone: Optional[str] = None
    buyer_email: Optional[str] = None
    shipping_address: Optional[dict[str, str]] = None
    notes: Optional[str] = None
    status: str
    status_group: StatusGroup
    subtotal_cents: int
    discount_cents: int = 0
    shipping_cents: int
    total_cents: int
    created_at: datetime
    items: list[AdminOrderItem] = []


class AdminCustomRequestListItem(AdminModel):
    id: str
    request_number: str
    org_name: Optional[str] = None
    requester_name: str
    quantity_estimate: Optional[int] = None
    status: str
    status_group: StatusGroup
    created_at: datetime


class AdminCustomRequestFile(AdminModel):
    id: str
    bucket: str
    path: str
    original_name: Optional[str] = None
    mime_type: Optional[str] = None
    size_bytes: Optional[int] = None
    created_at: datetime


class AdminCustomRequestDetail(AdminModel):
    id: str
    request_number: str
    requester_name: str
    whatsapp: Optional[str] = None
    org_name: Optional[str] = None
    product_types: list[str] = []
    quantity_estimate: Optional[int] = None
    deadline_date: Optional[date] = None
    notes: Optional[str] = None
    status: str
    status_group: StatusGroup
    created_at: datetime
    files: list[AdminCustomRequestFile] = []


class StatusUpdateResponse(AdminModel):
    id: str
    status: str
    status_group: StatusGroup
    updated_at: Optional[datetime] = None


class SignedUrlResponse(AdminModel):
    signed_url: str
    expires_at: datetime


# ==================== Products ====================

SLUG_PATTERN = r"^[a-z0-9]+(?:-[a-z0-9]+)*$"
NOT_NULL_PRODUCT_FIELDS = (
    "name",
    "slug",
    "price_cents",
    "currency",
    "images",
    "sizes",
    "colors",
    "in_stock",
    "is_active",
    "is_customizable",
)


class AdminProductInput(BaseModel):
    """New catalog product; field names match the product row"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: str = Field(min_length=1, max_length=200)
    slug: str = Field(min_length=1, max_length=120, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    price_cents: int = Field(ge=0)
    currency: str = "IDR"
    images: list[str] = []
    sizes: list[str] = []
    colors: list[ProductColor] = []
    category: Optional[str] = None
    in_stock: bool = True
    is_active: bool = True
    is_customizable: bool = False


class AdminProductUpdate(BaseModel):
    """Partial product update; only the fields sent are written"""
    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    name: Optional[str] = Field(None, min_length=1, max_length=200)
    slug: Optional[str] = Field(None, min_length=1, max_length=120, pattern=SLUG_PATTERN)
    description: Optional[str] = None
    price_cents: Optional[int] = Field(None, ge=0)
    currency: Optional[str] = None
    images: Optional[list[str]] = None
    sizes: Optional[list[str]] = None
    colors: Optional[list[ProductColor]] = None
    category: Optional[str] = None
    in_stock: Optional[bool] = None
    is_active: Optional[bool] = None
    is_customizable: Optional[bool] = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


class DeleteResponse(BaseModel):
    ok: bool = True

"""Checkout and order models"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..core.status import OrderStatus
from .customization import Customization


class OrderType(str, Enum):
    PERSONAL = "personal"
    BULK = "bulk"


class ContactInfo(BaseModel):
    """Buyer contact details as entered at checkout"""
    model_config = ConfigDict(extra="forbid")

    name: str = ""
    phone: str = ""
    email: Optional[str] = None


class ShippingAddress(BaseModel):
    """Shipping address for an order"""
    model_config = ConfigDict(extra="forbid")

    address_line1: str = ""
    city: str = ""
    country: str = "ID"


class CheckoutRequest(BaseModel):
    """Request to place an order from a cart selection"""
    model_config = ConfigDict(extra="forbid")

    cart_id: str
    selected_keys: list[str] = []
    order_type: OrderType = OrderType.PERSONAL
    contact: ContactInfo = Field(default_factory=ContactInfo)
    shipping_address: Optional[ShippingAddress] = None
    notes: Optional[str] = None
    # Total the shopper saw; checked against the server-side repricing
    expected_total_cents: Optional[int] = None
    # Honeypot, left empty by real browsers
    company_website: Optional[str] = None


class OrderItemPayload(BaseModel):
    """Order line sent to the persistence backend"""
    product_id: str
    quantity: int
    unit_price_cents: int
    custom_fee_cents: int = 0
    options: dict[str, str] = {}
    customization: Optional[dict[str, Any]] = None


class OrderSubmissionRequest(BaseModel):
    """Priced order handed to the persistence backend"""
    model_config = ConfigDict(frozen=True)

    buyer_name: str
    buyer_phone: str
    buyer_email: Optional[str] = None
    shipping_address: ShippingAddress
    notes: Optional[str] = None
    order_type: OrderType
    subtotal_cents: int
    discount_rate: float
    discount_cents: int
    shipping_cents: int
    total_cents: int
    total_quantity: int
    items: list[OrderItemPayload]


class CreateOrderResponse(BaseModel):
    """Response from a successful checkout"""
    id: str
    order_number: str
    lookup_token: str
    status: OrderStatus
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int
    created_at: datetime


class OrderLookupItem(BaseModel):
    product_id: Optional[str] = None
    quantity: int
    unit_price_cents: int
    custom_fee_cents: int = 0
    options: dict[str, str] = {}


class OrderLookupResponse(BaseModel):
    """Public view of an order found by number and lookup token"""
    order_number: str
    status: OrderStatus
    order_type: OrderType
    subtotal_cents: int
    discount_cents: int
    shipping_cents: int
    total_cents: int
    created_at: datetime
    items: list[OrderLookupItem] = []

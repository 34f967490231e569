"""Cart models for the storefront"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from .customization import Customization
from .order import OrderType
from .pricing import PricedOrderSnapshot


class CartLine(BaseModel):
    """Variant of a product held in a cart"""
    key: str
    product_id: str
    product_name: str
    slug: Optional[str] = None
    unit_price: int = Field(ge=0)
    size: str
    color: str
    quantity: int
    customization: Optional[Customization] = None
    custom_fee_per_unit: int = Field(default=0, ge=0)

    @property
    def options(self) -> dict[str, str]:
        return {"size": self.size, "color": self.color}


class Cart(BaseModel):
    """Shopping cart"""
    cart_id: str
    lines: list[CartLine] = []
    currency: str = "IDR"
    created_at: datetime
    updated_at: datetime

    @property
    def keys(self) -> set[str]:
        return {line.key for line in self.lines}

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self.lines)


class AddToCartRequest(BaseModel):
    """Request to add a variant to the cart"""
    product_id: str = Field(min_length=1)
    size: str = Field(min_length=1)
    color: str = Field(min_length=1)
    quantity: int = Field(default=1, gt=0)
    customization: Optional[Customization] = None


class UpdateCartItemRequest(BaseModel):
    """Request to set a line quantity; zero or less removes the line"""
    quantity: int


class QuoteRequest(BaseModel):
    """Request to price a selection of cart lines"""
    selected_keys: list[str] = []
    order_type: OrderType = OrderType.PERSONAL


class CartResponse(BaseModel):
    """Cart API response"""
    cart: Cart
    summary: PricedOrderSnapshot
    message: Optional[str] = None

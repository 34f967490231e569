# Storefront Models

from .product import Product, ProductColor, ProductListResponse
from .customization import Customization, CustomPart, DesignPosition, Offset
from .pricing import PricedOrderSnapshot
from .order import (
    OrderType,
    ContactInfo,
    ShippingAddress,
    CheckoutRequest,
    OrderItemPayload,
    OrderSubmissionRequest,
    CreateOrderResponse,
    OrderLookupResponse,
)
from .cart import (
    Cart,
    CartLine,
    AddToCartRequest,
    UpdateCartItemRequest,
    QuoteRequest,
    CartResponse,
)

__all__ = [
    "Product",
    "ProductColor",
    "ProductListResponse",
    "Customization",
    "CustomPart",
    "DesignPosition",
    "Offset",
    "PricedOrderSnapshot",
    "OrderType",
    "ContactInfo",
    "ShippingAddress",
    "CheckoutRequest",
    "OrderItemPayload",
    "OrderSubmissionRequest",
    "CreateOrderResponse",
    "OrderLookupResponse",
    "Cart",
    "CartLine",
    "AddToCartRequest",
    "UpdateCartItemRequest",
    "QuoteRequest",
    "CartResponse",
]

"""Cart API routes for the storefront"""

from typing import Optional

from fastapi import APIRouter, Depends

from ..core.errors import ApiError
from ..database.carts import CartStore
from ..models.cart import (
    AddToCartRequest,
    Cart,
    CartResponse,
    QuoteRequest,
    UpdateCartItemRequest,
)
from ..models.order import OrderType
from ..models.pricing import PricedOrderSnapshot
from ..pricing import price_selection
from ..services.backend import BackendClient
from .deps import get_backend, get_cart_store

router = APIRouter(prefix="/api/cart", tags=["Cart"])


def _require_cart(carts: CartStore, cart_id: str) -> Cart:
    cart = carts.get_cart(cart_id)
    if not cart:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Cart not found.")
    return cart


def _cart_response(cart: Cart, message: Optional[str] = None) -> CartResponse:
    summary = price_selection(cart.lines, cart.keys, OrderType.PERSONAL)
    return CartResponse(cart=cart, summary=summary, message=message)


@router.post("", response_model=CartResponse, status_code=201)
async def create_cart(carts: CartStore = Depends(get_cart_store)):
    """Create a new shopping cart"""
    cart = carts.create_cart()
    return _cart_response(cart, "Cart created")


@router.get("/{cart_id}", response_model=CartResponse)
async def get_cart(cart_id: str, carts: CartStore = Depends(get_cart_store)):
    """Get cart by ID"""
    return _cart_response(_require_cart(carts, cart_id))


@router.post("/{cart_id}/items", response_model=CartResponse)
async def add_to_cart(
    cart_id: str,
    request: AddToCartRequest,
    carts: CartStore = Depends(get_cart_store),
    backend: BackendClient = Depends(get_backend),
):
    """Add a product variant to the cart"""
    _require_cart(carts, cart_id)

    found = await backend.fetch_products_by_ids([request.product_id])
    product = next((p for p in found if p.id == request.product_id and p.is_active), None)
    if not product:
        raise ApiError(
            status_code=404,
            code="NOT_FOUND",
            message="Product not found.",
            field_errors={"product_id": "No active product with this id."},
        )

    field_errors = {}
    if not product.in_stock:
        field_errors["product_id"] = "This product is out of stock."
    if product.sizes and request.size not in product.sizes:
        field_errors["size"] = f"Available sizes: {', '.join(product.sizes)}"
    if product.colors and request.color not in {c.code for c in product.colors}:
        field_errors["color"] = "Color is not available for this product."
    if request.customization is not None and not product.is_customizable:
        field_errors["customization"] = "This product cannot be customized."
    if field_errors:
        raise ApiError(
            status_code=400,
            code="VALIDATION_ERROR",
            message="Request values are invalid.",
            field_errors=field_errors,
        )

    updated_cart = carts.add_line(
        cart_id,
        product,
        size=request.size,
        color=request.color,
        quantity=request.quantity,
        customization=request.customization,
    )
    return _cart_response(updated_cart, f"Added {request.quantity}x {product.name} to cart")


@router.put("/{cart_id}/items/{key:path}", response_model=CartResponse)
async def update_cart_item(
    cart_id: str,
    key: str,
    request: UpdateCartItemRequest,
    carts: CartStore = Depends(get_cart_store),
):
    """Set a line quantity; zero or less removes it"""
    _require_cart(carts, cart_id)

    updated_cart = carts.update_line_quantity(cart_id, key, request.quantity)
    if not updated_cart:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Item not in cart.")
    return _cart_response(updated_cart, "Cart updated")


@router.delete("/{cart_id}/items/{key:path}", response_model=CartResponse)
async def remove_from_cart(
    cart_id: str,
    key: str,
    carts: CartStore = Depends(get_cart_store),
):
    """Remove a line from the cart"""
    _require_cart(carts, cart_id)

    updated_cart = carts.remove_line(cart_id, key)
    if not updated_cart:
        raise ApiError(status_code=404, code="NOT_FOUND", message="Item not in cart.")
    return _cart_response(updated_cart, "Item removed")


@router.delete("/{cart_id}", response_model=CartResponse)
async def clear_cart(cart_id: str, carts: CartStore = Depends(get_cart_store)):
    """Clear all lines from cart"""
    _require_cart(carts, cart_id)
    return _cart_response(carts.clear_cart(cart_id), "Cart cleared")


@router.post("/{cart_id}/quote", response_model=PricedOrderSnapshot)
async def quote_selection(
    cart_id: str,
    request: QuoteRequest,
    carts: CartStore = Depends(get_cart_store),
):
    """
    Price a selection of cart lines.

    Bulk orders receive the quantity discount. Keys not in the cart are
    ignored; an empty selection prices to zero.
    """
    cart = _require_cart(carts, cart_id)
    return price_selection(cart.lines, request.selected_keys, request.order_type)

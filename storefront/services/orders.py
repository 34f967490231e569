"""
Order placement

Checkout never trusts prices from the client: selected cart lines are
repriced from the catalog and the discount is recomputed before anything
is written. The order header and its lines are written as one unit; if the
lines cannot be stored the header is deleted again.
"""

import logging
import secrets
from typing import Optional

from ..core.errors import ApiError
from ..core.status import OrderStatus
from ..database.carts import CartStore
from ..models.cart import CartLine
from ..models.order import (
    CheckoutRequest,
    CreateOrderResponse,
    OrderLookupItem,
    OrderLookupResponse,
    OrderSubmissionRequest,
)
from ..models.product import Product
from ..pricing import (
    build_order_payload,
    format_idr,
    get_custom_fee,
    price_selection,
    select_lines,
)
from .backend import BackendClient, BackendError
from .notifications import SlackNotifier
from .references import generate_reference, is_non_empty

logger = logging.getLogger(__name__)

ORDER_NUMBER_PREFIX = "EUY"


def validate_checkout(request: CheckoutRequest) -> dict[str, str]:
    """Field-level errors for the buyer details of a checkout"""
    field_errors: dict[str, str] = {}

    if not is_non_empty(request.contact.name):
        field_errors["contact.name"] = "Name is required."
    if not is_non_empty(request.contact.phone):
        field_errors["contact.phone"] = "Phone number is required."

    address = request.shipping_address
    if address is None:
        field_errors["shipping_address"] = "Shipping address is required."
    else:
        if not is_non_empty(address.address_line1):
            field_errors["shipping_address.address_line1"] = "Address is required."
        if not is_non_empty(address.city):
            field_errors["shipping_address.city"] = "City is required."
        if not is_non_empty(address.country):
            field_errors["shipping_address.country"] = "Country is required."

    return field_errors


def reprice_lines(lines: list[CartLine], products: dict[str, Product]) -> list[CartLine]:
    """Copies of ``lines`` carrying current catalog prices and design fees"""
    return [
        line.model_copy(
            update={
                "unit_price": products[line.product_id].price_cents,
                "custom_fee_per_unit": get_custom_fee(line.customization),
            }
        )
        for line in lines
    ]


def _order_row(payload: OrderSubmissionRequest, order_number: str, lookup_token: str) -> dict:
    row = payload.model_dump(mode="json", exclude={"items"})
    row.update(
        order_number=order_number,
        lookup_token=lookup_token,
        status=OrderStatus.PENDING_CONFIRMATION.value,
    )
    return row


class OrderService:
    """Places orders from cart selections and serves public order lookups"""

    def __init__(self, backend: BackendClient, notifier: SlackNotifier, carts: CartStore):
        self.backend = backend
        self.notifier = notifier
        self.carts = carts

    async def place_order(self, request: CheckoutRequest) -> CreateOrderResponse:
        if is_non_empty(request.company_website):
            raise ApiError(
                status_code=400,
                code="SPAM_DETECTED",
                message="The request could not be processed.",
                field_errors={"company_website": "Honeypot field was filled in."},
            )

        field_errors = validate_checkout(request)
        if field_errors:
            raise ApiError(
                status_code=400,
                code="VALIDATION_ERROR",
                message="Request values are invalid.",
                field_errors=field_errors,
            )

        if not request.selected_keys:
            raise ApiError(
                status_code=400,
                code="EMPTY_SELECTION",
                message="Select at least one item to check out.",
                field_errors={"selected_keys": "Select at least one item."},
            )

        cart = self.carts.get_cart(request.cart_id)
        if not cart:
            raise ApiError(status_code=404, code="NOT_FOUND", message="Cart not found.")

        unknown = set(request.selected_keys) - cart.keys
        if unknown:
            raise ApiError(
                status_code=400,
                code="VALIDATION_ERROR",
                message="Request values are invalid.",
                field_errors={"selected_keys": "Selection contains items that are not in the cart."},
            )

        selected = select_lines(cart.lines, request.selected_keys)

        products = {
            product.id: product
            for product in await self.backend.fetch_products_by_ids(
                line.product_id for line in selected
            )
            if product.is_active
        }
        missing = sorted({line.product_id for line in selected} - products.keys())
        if missing:
            raise ApiError(
                status_code=400,
                code="INVALID_PRODUCT",
                message="The order contains products that are no longer available.",
                field_errors={"selected_keys": f"Unavailable products: {', '.join(missing)}"},
            )

        lines = reprice_lines(selected, products)
        snapshot = price_selection(lines, request.selected_keys, request.order_type)

        if request.expected_total_cents is not None and request.expected_total_cents != snapshot.total:
            raise ApiError(
                status_code=400,
                code="PRICE_MISMATCH",
                message="Prices have changed. Please review your order.",
                field_errors={
                    "expected_total_cents": f"Current total is {snapshot.total}.",
                },
            )

        payload = build_order_payload(
            snapshot,
            request.contact,
            request.shipping_address,
            lines,
            order_type=request.order_type,
            notes=request.notes,
        )

        order_number = generate_reference(ORDER_NUMBER_PREFIX)
        lookup_token = secrets.token_urlsafe(16)
        order = await self.backend.insert_order(_order_row(payload, order_number, lookup_token))

        await self._insert_items(order["id"], payload)

        await self.notifier.send(
            "\n".join([
                f"NEW ORDER - {order['order_number']}",
                f"Buyer: {payload.buyer_name}",
                f"Type: {payload.order_type.value}",
                f"Total: {format_idr(payload.total_cents)}",
                f"Items: {len(payload.items)} ({payload.total_quantity} pcs)",
                f"Admin: /admin/orders/{order['id']}",
            ])
        )

        self.carts.remove_lines(cart.cart_id, request.selected_keys)

        logger.info(
            f"Order {order['order_number']} created: {payload.total_cents} "
            f"({payload.order_type.value}, {payload.total_quantity} pcs)"
        )

        return CreateOrderResponse.model_validate({**order, "lookup_token": lookup_token})

    async def _insert_items(self, order_id: str, payload: OrderSubmissionRequest) -> None:
        rows = [
            {"order_id": order_id, **item.model_dump(mode="json")}
            for item in payload.items
        ]
        try:
            await self.backend.insert_order_items(rows)
        except BackendError:
            logger.error(f"Order lines for {order_id} failed - deleting order header")
            try:
                await self.backend.delete_order(order_id)
            except BackendError as cleanup_error:
                logger.error(f"Could not delete order {order_id}: {cleanup_error}")
            raise

    async def lookup_order(self, order_number: str, lookup_token: str) -> Optional[OrderLookupResponse]:
        """Order matching both the number and its lookup token"""
        if not is_non_empty(order_number) or not is_non_empty(lookup_token):
            return None

        order = await self.backend.find_order_by_lookup(order_number.strip(), lookup_token.strip())
        if not order:
            return None

        items = await self.backend.list_order_items(order["id"])
        return OrderLookupResponse.model_validate({
            **order,
            "items": [
                OrderLookupItem.model_validate({**item, "options": item.get("options") or {}})
                for item in items
            ],
        })

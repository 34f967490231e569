"""Order payload assembly"""

from typing import Iterable, Optional, Union

from ..models.cart import CartLine
from ..models.order import (
    ContactInfo,
    OrderItemPayload,
    OrderSubmissionRequest,
    OrderType,
    ShippingAddress,
)
from ..models.pricing import PricedOrderSnapshot


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def build_order_item(line: CartLine) -> OrderItemPayload:
    return OrderItemPayload(
        product_id=line.product_id,
        quantity=line.quantity,
        unit_price_cents=line.unit_price,
        custom_fee_cents=line.custom_fee_per_unit,
        options=line.options,
        customization=line.customization.model_dump(mode="json") if line.customization else None,
    )


def build_order_payload(
    snapshot: PricedOrderSnapshot,
    contact: ContactInfo,
    shipping: ShippingAddress,
    lines: Iterable[CartLine],
    order_type: Union[OrderType, str] = OrderType.PERSONAL,
    notes: Optional[str] = None,
) -> OrderSubmissionRequest:
    """Package a priced selection with buyer details for persistence"""
    return OrderSubmissionRequest(
        buyer_name=contact.name.strip(),
        buyer_phone=contact.phone.strip(),
        buyer_email=_clean(contact.email),
        shipping_address=ShippingAddress(
            address_line1=shipping.address_line1.strip(),
            city=shipping.city.strip(),
            country=shipping.country.strip(),
        ),
        notes=_clean(notes),
        order_type=OrderType(order_type),
        subtotal_cents=snapshot.subtotal,
        discount_rate=snapshot.discount_rate,
        discount_cents=snapshot.discount_amount,
        shipping_cents=snapshot.shipping_fee,
        total_cents=snapshot.total,
        total_quantity=snapshot.total_quantity,
        items=[build_order_item(line) for line in lines],
    )

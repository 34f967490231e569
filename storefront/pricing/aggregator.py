"""Cart selection pricing"""

from decimal import Decimal
from typing import Iterable, Union

from ..models.cart import CartLine
from ..models.order import OrderType
from ..models.pricing import PricedOrderSnapshot
from .discounts import resolve_discount_rate
from .money import Money, clamp_quantity, round_half_up

SHIPPING_FEE: Money = 0


def select_lines(lines: Iterable[CartLine], selected_keys: Iterable[str]) -> list[CartLine]:
    """Lines whose key is selected, in cart order"""
    keys = set(selected_keys)
    return [line for line in lines if line.key in keys]


def line_total(line: CartLine) -> Money:
    unit = max(0, line.unit_price) + max(0, line.custom_fee_per_unit)
    return unit * clamp_quantity(line.quantity)


def price_selection(
    lines: Iterable[CartLine],
    selected_keys: Iterable[str],
    order_type: Union[OrderType, str],
    shipping_fee: Money = SHIPPING_FEE,
) -> PricedOrderSnapshot:
    """
    Price the selected lines of a cart.

    Bulk orders get the quantity-tiered discount, personal orders pay full
    price. An empty selection prices to all zeros.
    """
    selected = select_lines(lines, selected_keys)

    total_quantity = sum(clamp_quantity(line.quantity) for line in selected)
    subtotal = sum(line_total(line) for line in selected)

    if OrderType(order_type) == OrderType.BULK:
        discount_rate = resolve_discount_rate(total_quantity)
    else:
        discount_rate = 0.0

    discount_amount = round_half_up(Decimal(subtotal) * Decimal(str(discount_rate)))
    discount_amount = min(discount_amount, subtotal)

    shipping_fee = max(0, shipping_fee) if selected else 0
    total = subtotal - discount_amount + shipping_fee

    return PricedOrderSnapshot(
        subtotal=subtotal,
        discount_rate=discount_rate,
        discount_amount=discount_amount,
        shipping_fee=shipping_fee,
        total=total,
        total_quantity=total_quantity,
    )

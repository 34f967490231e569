"""Money and quantity helpers; amounts are integer minor units"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, Union

Money = int


def clamp_quantity(quantity: Optional[int]) -> int:
    """Missing or negative quantities count as zero"""
    if quantity is None:
        return 0
    return max(0, int(quantity))


def round_half_up(value: Union[Decimal, int, float]) -> Money:
    """Round to the nearest whole minor unit, halves away from zero"""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_idr(amount: Money) -> str:
    """Render an amount as ``Rp 1.700.000``"""
    return "Rp " + f"{amount:,}".replace(",", ".")

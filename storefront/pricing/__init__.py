# Order pricing and discount engine

from .money import Money, clamp_quantity, round_half_up, format_idr
from .discounts import DiscountTier, DISCOUNT_TIERS, resolve_discount_rate
from .customization import CUSTOM_FEE_PER_POSITION, get_applied_positions, get_custom_fee
from .aggregator import price_selection, select_lines
from .assembly import build_order_payload

__all__ = [
    "Money",
    "clamp_quantity",
    "round_half_up",
    "format_idr",
    "DiscountTier",
    "DISCOUNT_TIERS",
    "resolve_discount_rate",
    "CUSTOM_FEE_PER_POSITION",
    "get_applied_positions",
    "get_custom_fee",
    "price_selection",
    "select_lines",
    "build_order_payload",
]

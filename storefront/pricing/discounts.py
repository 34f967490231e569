"""Bulk order discount tiers"""

from dataclasses import dataclass


@dataclass(frozen=True)
class DiscountTier:
    """Discount applied once the total quantity reaches ``min_quantity``"""
    min_quantity: int
    rate: float


# Ascending by min_quantity
DISCOUNT_TIERS: tuple[DiscountTier, ...] = (
    DiscountTier(min_quantity=10, rate=0.10),
    DiscountTier(min_quantity=25, rate=0.15),
    DiscountTier(min_quantity=50, rate=0.20),
    DiscountTier(min_quantity=100, rate=0.30),
)


def resolve_discount_rate(
    total_quantity: int,
    tiers: tuple[DiscountTier, ...] = DISCOUNT_TIERS,
) -> float:
    """
    Rate of the highest tier the quantity qualifies for.

    Tiers do not stack. Quantities below the lowest tier, and negative
    quantities, get no discount.
    """
    quantity = max(0, total_quantity)
    for tier in reversed(tiers):
        if quantity >= tier.min_quantity:
            return tier.rate
    return 0.0

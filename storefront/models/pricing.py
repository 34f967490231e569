"""Priced order snapshot"""

from pydantic import BaseModel, ConfigDict


class PricedOrderSnapshot(BaseModel):
    """
    Totals for one cart selection, in minor currency units.

    Never mutated; any change to the selection produces a new snapshot.
    """
    model_config = ConfigDict(frozen=True)

    subtotal: int = 0
    discount_rate: float = 0.0
    discount_amount: int = 0
    shipping_fee: int = 0
    total: int = 0
    total_quantity: int = 0

"""Custom design fees"""

from typing import Optional

from ..models.customization import Customization, DesignPosition
from .money import Money

CUSTOM_FEE_PER_POSITION: Money = 25_000


def get_applied_positions(customization: Optional[Customization]) -> frozenset[DesignPosition]:
    """Positions carrying an image or non-blank text"""
    if customization is None:
        return frozenset()
    return frozenset(
        position
        for position, part in customization.parts.items()
        if part.applied
    )


def get_custom_fee(customization: Optional[Customization]) -> Money:
    """Per-unit fee for the applied positions of a design"""
    return len(get_applied_positions(customization)) * CUSTOM_FEE_PER_POSITION

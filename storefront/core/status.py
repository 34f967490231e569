"""Order and custom-request status tables for the admin back-office"""

from enum import Enum
from typing import Optional


class StatusGroup(str, Enum):
    NEW = "NEW"
    IN_PROGRESS = "IN_PROGRESS"
    DONE = "DONE"


class OrderStatus(str, Enum):
    PENDING_CONFIRMATION = "PENDING_CONFIRMATION"
    PENDING_PAYMENT = "PENDING_PAYMENT"
    CONFIRMED = "CONFIRMED"
    IN_PRODUCTION = "IN_PRODUCTION"
    SHIPPED = "SHIPPED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class CustomRequestStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    QUOTED = "quoted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


ORDER_STATUS_GROUPS: dict[StatusGroup, tuple[str, ...]] = {
    StatusGroup.NEW: ("PENDING_CONFIRMATION", "PENDING_PAYMENT"),
    StatusGroup.IN_PROGRESS: ("CONFIRMED", "IN_PRODUCTION", "SHIPPED"),
    StatusGroup.DONE: ("COMPLETED", "CANCELLED"),
}

CUSTOM_REQUEST_STATUS_GROUPS: dict[StatusGroup, tuple[str, ...]] = {
    StatusGroup.NEW: ("pending",),
    StatusGroup.IN_PROGRESS: ("reviewing", "quoted", "accepted"),
    StatusGroup.DONE: ("completed", "rejected"),
}

# Concrete status written when an admin submits a group name
_ORDER_GROUP_DEFAULTS = {
    StatusGroup.NEW: OrderStatus.PENDING_CONFIRMATION.value,
    StatusGroup.IN_PROGRESS: OrderStatus.IN_PRODUCTION.value,
    StatusGroup.DONE: OrderStatus.COMPLETED.value,
}

_CUSTOM_GROUP_DEFAULTS = {
    StatusGroup.NEW: CustomRequestStatus.PENDING.value,
    StatusGroup.IN_PROGRESS: CustomRequestStatus.REVIEWING.value,
    StatusGroup.DONE: CustomRequestStatus.COMPLETED.value,
}


def _group_of(status: str, groups: dict[StatusGroup, tuple[str, ...]]) -> StatusGroup:
    for group in (StatusGroup.NEW, StatusGroup.IN_PROGRESS):
        if status in groups[group]:
            return group
    return StatusGroup.DONE


def _parse_group(value: str) -> Optional[StatusGroup]:
    try:
        return StatusGroup(value)
    except ValueError:
        return None


def map_order_status_to_group(status: str) -> StatusGroup:
    return _group_of(status, ORDER_STATUS_GROUPS)


def map_custom_status_to_group(status: str) -> StatusGroup:
    return _group_of(status, CUSTOM_REQUEST_STATUS_GROUPS)


def resolve_order_status_input(value: str) -> Optional[str]:
    """Resolve a status or group name to the concrete order status to store"""
    group = _parse_group(value)
    if group:
        return _ORDER_GROUP_DEFAULTS[group]
    if value in OrderStatus._value2member_map_:
        return value
    return None


def resolve_custom_status_input(value: str) -> Optional[str]:
    group = _parse_group(value)
    if group:
        return _CUSTOM_GROUP_DEFAULTS[group]
    if value in CustomRequestStatus._value2member_map_:
        return value
    return None


def _resolve_filter(
    value: Optional[str],
    groups: dict[StatusGroup, tuple[str, ...]],
    known: dict,
) -> Optional[list[str]]:
    if not value or value == "ALL":
        return None
    group = _parse_group(value)
    if group:
        return list(groups[group])
    if value in known:
        return [value]
    return None


def resolve_order_status_filter(value: Optional[str]) -> Optional[list[str]]:
    """
    Translate a list filter into the statuses to match.

    Returns None for "no filter" (missing or ALL) and also for an unknown
    value; callers tell the two apart by checking the input.
    """
    return _resolve_filter(value, ORDER_STATUS_GROUPS, OrderStatus._value2member_map_)


def resolve_custom_status_filter(value: Optional[str]) -> Optional[list[str]]:
    return _resolve_filter(value, CUSTOM_REQUEST_STATUS_GROUPS, CustomRequestStatus._value2member_map_)

"""Order status values and the transitions between them.

The default table is permissive: any status may be moved to `paid` or
`cancelled`. `STRICT_TRANSITIONS` is used when
`enforce_status_transitions` is switched on.
"""

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    CANCELLED = "cancelled"


ALLOWED_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: {OrderStatus.PAID, OrderStatus.CANCELLED},
}

STRICT_TRANSITIONS: dict[OrderStatus, set[OrderStatus]] = {
    OrderStatus.PENDING: {OrderStatus.PAID, OrderStatus.CANCELLED},
    OrderStatus.PAID: {OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: set(),
}


def transitions_for(strict: bool) -> dict[OrderStatus, set[OrderStatus]]:
    return STRICT_TRANSITIONS if strict else ALLOWED_TRANSITIONS


def sources_of(new: OrderStatus, strict: bool = False) -> list[str]:
    """Statuses an order may currently hold for a move to `new` to be legal."""

    table = transitions_for(strict)
    return sorted(current.value for current, targets in table.items() if new in targets)


def validate_transition(current: str, new: str, strict: bool = False) -> None:
    """Raise when a transition is not allowed by the active table."""

    table = transitions_for(strict)
    try:
        allowed = table.get(OrderStatus(current), set())
    except ValueError:
        allowed = set()
    if OrderStatus(new) not in allowed:
        raise ValueError(f"Invalid transition: {current} -> {new}")

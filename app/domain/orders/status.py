from __future__ import annotations

from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    FULFILLED = "fulfilled"
    CANCELLED = "cancelled"

    @classmethod
    def values(cls) -> list[str]:
        return [status.value for status in cls]

    @property
    def label(self) -> str:
        return _LABELS[self]

    @property
    def color(self) -> str:
        """UI badge color used by the dashboard."""
        return _COLORS[self]

    @property
    def is_terminal(self) -> bool:
        return not _TRANSITIONS[self]

    def allowed_transitions(self) -> tuple[OrderStatus, ...]:
        return _TRANSITIONS[self]

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _TRANSITIONS[self]


_LABELS = {
    OrderStatus.PENDING: "Pending",
    OrderStatus.PROCESSING: "Processing",
    OrderStatus.FULFILLED: "Fulfilled",
    OrderStatus.CANCELLED: "Cancelled",
}

_COLORS = {
    OrderStatus.PENDING: "yellow",
    OrderStatus.PROCESSING: "blue",
    OrderStatus.FULFILLED: "green",
    OrderStatus.CANCELLED: "red",
}

# Self-transitions are deliberately absent.
_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    OrderStatus.PROCESSING: (OrderStatus.FULFILLED, OrderStatus.CANCELLED),
    OrderStatus.FULFILLED: (),
    OrderStatus.CANCELLED: (),
}

# Statuses an order must not be in to be deleted, with the reason reported.
DELETION_BLOCKERS: dict[OrderStatus, str] = {
    OrderStatus.PROCESSING: "Order is currently being processed",
    OrderStatus.FULFILLED: "Order has been fulfilled",
}

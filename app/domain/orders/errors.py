from __future__ import annotations

from typing import Any

from app.domain.orders.status import OrderStatus


class OrderError(Exception):
    """Base class for order domain failures; ``str(exc)`` is user-facing."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class OrderNotFoundError(OrderError, LookupError):
    def __init__(self, order_id: int):
        super().__init__(f"Order with ID {order_id} not found")
        self.order_id = order_id


class OrderItemNotFoundError(OrderError, LookupError):
    def __init__(self, item_id: int):
        super().__init__(f"Order item with ID {item_id} not found")
        self.item_id = item_id


class InvalidStatusTransitionError(OrderError):
    def __init__(self, current: OrderStatus, target: OrderStatus):
        super().__init__(f"Cannot transition order from {current.value} to {target.value}")
        self.current = current
        self.target = target


class OrderCannotBeDeletedError(OrderError):
    def __init__(self, reason: str):
        super().__init__(f"Order cannot be deleted: {reason}")
        self.reason = reason


class OrderValidationError(OrderError, ValueError):
    def __init__(self, message: str, errors: dict[str, list[str]] | None = None):
        super().__init__(message)
        self.errors = errors or {}

    @classmethod
    def from_pydantic(cls, exc: Any, prefix: str = "") -> OrderValidationError:
        """Flatten a pydantic ``ValidationError`` into ``{"field.path": [messages]}``."""
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ())]
            field = ".".join([prefix, *loc] if prefix else loc) or "__root__"
            errors.setdefault(field, []).append(error.get("msg", "invalid value"))
        fields = ", ".join(errors)
        return cls(f"Invalid input for: {fields}", errors)

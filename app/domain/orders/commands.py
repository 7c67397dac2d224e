from __future__ import annotations

import re
from decimal import Decimal
from typing import Any, Mapping, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.domain.orders.aggregates import to_money
from app.domain.orders.errors import OrderValidationError
from app.domain.orders.status import OrderStatus

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[A-Za-z0-9-]{2,}$")

MIN_QUANTITY = 1
MAX_QUANTITY = 9999
MIN_UNIT_PRICE = Decimal("0.01")
MAX_UNIT_PRICE = Decimal("999999.99")
MAX_NOTES_LENGTH = 1000

CommandT = TypeVar("CommandT", bound=BaseModel)


def _require_text(value: str, label: str) -> str:
    stripped = value.strip()
    if not stripped:
        raise ValueError(f"{label} cannot be empty")
    return stripped


class CreateOrderItemCommand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    product_name: str = Field(max_length=255)
    quantity: int = Field(ge=MIN_QUANTITY, le=MAX_QUANTITY)
    unit_price: Decimal = Field(ge=MIN_UNIT_PRICE, le=MAX_UNIT_PRICE)

    @field_validator("product_name")
    @classmethod
    def _product_name_not_blank(cls, value: str) -> str:
        return _require_text(value, "Product name")

    @field_validator("unit_price")
    @classmethod
    def _unit_price_to_cents(cls, value: Decimal) -> Decimal:
        return to_money(value)

    def calculate_subtotal(self) -> Decimal:
        return to_money(self.quantity * self.unit_price)


class UpdateOrderItemCommand(BaseModel):
    """Partial item update; omitted fields keep their stored value."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    product_name: str | None = Field(default=None, max_length=255)
    quantity: int | None = Field(default=None, ge=MIN_QUANTITY, le=MAX_QUANTITY)
    unit_price: Decimal | None = Field(default=None, ge=MIN_UNIT_PRICE, le=MAX_UNIT_PRICE)

    @field_validator("product_name")
    @classmethod
    def _product_name_not_blank(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return _require_text(value, "Product name")

    @field_validator("unit_price")
    @classmethod
    def _unit_price_to_cents(cls, value: Decimal | None) -> Decimal | None:
        return None if value is None else to_money(value)


class CreateOrderCommand(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    customer_name: str = Field(max_length=255)
    customer_email: str = Field(max_length=255)
    notes: str | None = Field(default=None, max_length=MAX_NOTES_LENGTH)
    items: list[CreateOrderItemCommand] = Field(default_factory=list)

    @field_validator("customer_name")
    @classmethod
    def _customer_name_not_blank(cls, value: str) -> str:
        return _require_text(value, "Customer name")

    @field_validator("customer_email")
    @classmethod
    def _email_format(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise ValueError("Invalid email format")
        return value


class UpdateOrderStatusCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: OrderStatus


def parse_command(command_cls: type[CommandT], data: CommandT | Mapping[str, Any]) -> CommandT:
    if isinstance(data, command_cls):
        return data
    try:
        return command_cls.model_validate(data)
    except ValidationError as exc:
        raise OrderValidationError.from_pydantic(exc) from exc

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from app.core.clock import ensure_utc
from app.core.config import get_settings


def isoformat_z(value: datetime | None) -> str | None:
    value = ensure_utc(value)
    if value is None:
        return None
    return value.isoformat().replace("+00:00", "Z")


def format_money(value: Decimal | int | float | None) -> str:
    amount = Decimal(str(value if value is not None else 0))
    symbol = get_settings().currency_symbol
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):,.2f}"


def pluralize(count: int, singular: str, plural: str | None = None) -> str:
    word = singular if count == 1 else (plural or f"{singular}s")
    return f"{count} {word}"

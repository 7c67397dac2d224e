from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Select, func, or_, select
from sqlalchemy.orm import Session, selectinload

from app.core.config import get_settings
from app.domain.orders.commands import parse_command
from app.domain.orders.errors import OrderValidationError
from app.domain.orders.status import OrderStatus
from app.persistence.models import OrderModel

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Escape LIKE metacharacters so ``term`` is matched literally."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


class OrderFilters(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    KEYS: ClassVar[tuple[str, ...]] = ("status", "search", "page", "per_page")

    status: OrderStatus | None = None
    search: str | None = None
    page: int | None = Field(default=None, ge=1)
    per_page: int | None = Field(default=None, ge=1)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any] | None) -> OrderFilters:
        raw = raw or {}
        for key in raw:
            if key not in cls.KEYS:
                raise OrderValidationError(
                    f"Invalid filter key: {key}",
                    {key: ["Unrecognized filter key."]},
                )
        # Query strings send empty values for cleared dashboard filters.
        cleaned = {key: value for key, value in raw.items() if value is not None and value != ""}
        return parse_command(cls, cleaned)

    @property
    def is_paginated(self) -> bool:
        return self.page is not None

    @property
    def search_term(self) -> str | None:
        if self.search is None:
            return None
        term = self.search.strip()
        return term or None

    def get_per_page(self, default: int = 15) -> int:
        return self.per_page if self.per_page is not None else default


@dataclass
class Page:
    items: list[OrderModel]
    current_page: int
    per_page: int
    total: int

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    @property
    def from_(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def to(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + len(self.items)


class OrderQuery:
    """Read-only listing of orders with items eagerly attached."""

    def __init__(self, session: Session):
        self.session = session

    def _where(self, stmt: Select, filters: OrderFilters) -> Select:
        if filters.status is not None:
            stmt = stmt.where(OrderModel.status == filters.status)

        term = filters.search_term
        if term is not None:
            pattern = f"%{escape_like(term)}%"
            stmt = stmt.where(
                or_(
                    OrderModel.order_number.ilike(pattern, escape=LIKE_ESCAPE),
                    OrderModel.customer_name.ilike(pattern, escape=LIKE_ESCAPE),
                    OrderModel.customer_email.ilike(pattern, escape=LIKE_ESCAPE),
                )
            )
        return stmt

    def count(self, filters: OrderFilters) -> int:
        stmt = self._where(select(func.count(OrderModel.id)), filters)
        return int(self.session.scalar(stmt) or 0)

    def list_orders(self, filters: OrderFilters | None = None) -> list[OrderModel] | Page:
        filters = filters or OrderFilters()
        stmt = self._where(select(OrderModel).options(selectinload(OrderModel.items)), filters)
        stmt = stmt.order_by(OrderModel.ordered_at.desc(), OrderModel.id.desc())

        if not filters.is_paginated:
            return list(self.session.scalars(stmt).all())

        settings = get_settings()
        per_page = filters.get_per_page(settings.default_per_page)
        if per_page > settings.max_per_page:
            raise OrderValidationError(
                "Invalid input for: per_page",
                {"per_page": [f"Must not be greater than {settings.max_per_page}."]},
            )
        page = filters.page or 1
        rows = self.session.scalars(stmt.offset((page - 1) * per_page).limit(per_page)).all()
        return Page(items=list(rows), current_page=page, per_page=per_page, total=self.count(filters))

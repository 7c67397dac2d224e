"""Order aggregate fields: ``total_amount`` and ``items_count``.

Both are derived from the order's items and must equal ``round(sum(subtotal), 2)``
and ``len(items)`` after every committed mutation. The service calls the
``after_item_*`` hooks explicitly once an item change is flushed; the order
write they perform is a plain column update and fires no further hooks.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.persistence.models import OrderItemModel, OrderModel

logger = logging.getLogger(__name__)

MONEY_QUANTUM = Decimal("0.01")
ZERO = Decimal("0.00")


def to_money(value: Decimal | int | str) -> Decimal:
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return value.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class OrderTotals:
    total_amount: Decimal
    items_count: int

    def differs_from(self, order: OrderModel) -> bool:
        stored_total = to_money(order.total_amount if order.total_amount is not None else ZERO)
        stored_count = int(order.items_count or 0)
        return stored_total != self.total_amount or stored_count != self.items_count


def compute_totals(subtotals: Iterable[Decimal]) -> OrderTotals:
    total = ZERO
    count = 0
    for subtotal in subtotals:
        total += to_money(subtotal)
        count += 1
    return OrderTotals(total_amount=to_money(total), items_count=count)


def _apply(order: OrderModel, totals: OrderTotals) -> bool:
    if not totals.differs_from(order):
        return False
    order.total_amount = totals.total_amount
    order.items_count = totals.items_count
    logger.debug(
        "order totals updated: order_id=%s total_amount=%s items_count=%s",
        order.id,
        totals.total_amount,
        totals.items_count,
    )
    return True


def recalculate(session: Session, order_id: int) -> bool:
    """Re-query the order's items by foreign key and persist changed totals.

    Returns True when a write happened. An order that no longer exists is
    skipped.
    """
    session.flush()
    order = session.get(OrderModel, order_id)
    if order is None:
        return False

    subtotals = session.scalars(
        select(OrderItemModel.subtotal).where(OrderItemModel.order_id == order_id)
    ).all()
    changed = _apply(order, compute_totals(subtotals))
    if changed:
        session.flush()
    return changed


def sync_loaded_totals(order: OrderModel) -> bool:
    """Same as :func:`recalculate` but from the already-loaded ``order.items``."""
    return _apply(order, compute_totals(item.subtotal for item in order.items))


def after_item_created(session: Session, item: OrderItemModel) -> bool:
    return recalculate(session, item.order_id)


def after_item_updated(session: Session, item: OrderItemModel) -> bool:
    return recalculate(session, item.order_id)


def after_item_deleted(session: Session, order_id: int) -> bool:
    # The deleted row can no longer reach its order through the relationship,
    # so the caller hands over the foreign key captured before deletion.
    return recalculate(session, order_id)

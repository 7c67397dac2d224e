from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.orm import Session

from app.core.clock import now_utc
from app.domain.orders import aggregates
from app.domain.orders.aggregates import ZERO
from app.domain.orders.commands import (
    CreateOrderCommand,
    CreateOrderItemCommand,
    UpdateOrderItemCommand,
    UpdateOrderStatusCommand,
    parse_command,
)
from app.domain.orders.errors import (
    InvalidStatusTransitionError,
    OrderCannotBeDeletedError,
    OrderItemNotFoundError,
    OrderNotFoundError,
)
from app.domain.orders.numbering import generate_order_number
from app.domain.orders.queries import OrderFilters, OrderQuery, Page
from app.domain.orders.status import DELETION_BLOCKERS, OrderStatus
from app.domain.orders.store import OrderStore
from app.persistence.models import OrderItemModel, OrderModel

logger = logging.getLogger(__name__)


def _build_item(command: CreateOrderItemCommand) -> OrderItemModel:
    return OrderItemModel(
        product_name=command.product_name,
        quantity=command.quantity,
        unit_price=command.unit_price,
        subtotal=command.calculate_subtotal(),
    )


class OrderService:
    """Entry point for every order mutation.

    Methods run inside the caller's transaction (``session_scope`` or the
    ``get_session`` dependency), which commits on success and rolls back on any
    exception, so a failed call never leaves a partial order behind.
    """

    def __init__(self, session: Session):
        self.session = session
        self.store = OrderStore(session)

    def list_orders(self, filters: OrderFilters | Mapping[str, Any] | None = None) -> list[OrderModel] | Page:
        if not isinstance(filters, OrderFilters):
            filters = OrderFilters.from_mapping(filters)
        return OrderQuery(self.session).list_orders(filters)

    def get_order(self, order_id: int) -> OrderModel:
        order = self.store.find_by_id(order_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def create_order(self, data: CreateOrderCommand | Mapping[str, Any]) -> OrderModel:
        command = parse_command(CreateOrderCommand, data)

        order = OrderModel(
            order_number=generate_order_number(self.session),
            customer_name=command.customer_name,
            customer_email=command.customer_email,
            notes=command.notes,
            status=OrderStatus.PENDING,
            ordered_at=now_utc(),
            total_amount=ZERO,
            items_count=0,
        )
        self.store.add(order)

        for item_command in command.items:
            item = self.store.add_item(order, _build_item(item_command))
            aggregates.after_item_created(self.session, item)

        order = self.store.reload(order)
        aggregates.sync_loaded_totals(order)
        self.session.flush()

        logger.info(
            "order created: id=%s order_number=%s items=%s total_amount=%s",
            order.id,
            order.order_number,
            order.items_count,
            order.total_amount,
        )
        return order

    def update_status(self, order_id: int, new_status: OrderStatus | str) -> OrderModel:
        target = parse_command(UpdateOrderStatusCommand, {"status": new_status}).status
        order = self.get_order(order_id)
        current = order.status

        if not current.can_transition_to(target):
            raise InvalidStatusTransitionError(current, target)

        order.status = target
        if target is OrderStatus.FULFILLED:
            order.fulfilled_at = now_utc()
        if current is OrderStatus.FULFILLED and target is not OrderStatus.FULFILLED:
            order.fulfilled_at = None

        # Items are already loaded here, so totals are checked without another query.
        aggregates.sync_loaded_totals(order)
        self.store.save(order)
        logger.info("order status changed: id=%s %s -> %s", order.id, current.value, target.value)
        return order

    def delete_order(self, order_id: int) -> None:
        order = self.get_order(order_id)
        reason = DELETION_BLOCKERS.get(order.status)
        if reason is not None:
            raise OrderCannotBeDeletedError(reason)

        order_number = order.order_number
        self.store.delete(order)
        logger.info("order deleted: id=%s order_number=%s", order_id, order_number)

    def add_item(self, order_id: int, data: CreateOrderItemCommand | Mapping[str, Any]) -> OrderItemModel:
        command = parse_command(CreateOrderItemCommand, data)
        order = self.get_order(order_id)
        item = self.store.add_item(order, _build_item(command))
        aggregates.after_item_created(self.session, item)
        return item

    def update_item(self, item_id: int, data: UpdateOrderItemCommand | Mapping[str, Any]) -> OrderItemModel:
        command = parse_command(UpdateOrderItemCommand, data)
        item = self.store.find_item(item_id)
        if item is None:
            raise OrderItemNotFoundError(item_id)

        if command.product_name is not None:
            item.product_name = command.product_name
        if command.quantity is not None:
            item.quantity = command.quantity
        if command.unit_price is not None:
            item.unit_price = command.unit_price
        item.subtotal = aggregates.to_money(item.quantity * item.unit_price)

        self.session.flush()
        aggregates.after_item_updated(self.session, item)
        return item

    def remove_item(self, item_id: int) -> int:
        """Delete one item; returns the id of the order it belonged to."""
        item = self.store.find_item(item_id)
        if item is None:
            raise OrderItemNotFoundError(item_id)
        order_id = self.store.delete_item(item)
        aggregates.after_item_deleted(self.session, order_id)
        return order_id

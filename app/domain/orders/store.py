from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.orm import Session, selectinload

from app.persistence.models import OrderItemModel, OrderModel


class OrderStore:
    """Row-level access to orders and their items within one session."""

    def __init__(self, session: Session):
        self.session = session

    def find_by_id(self, order_id: int) -> OrderModel | None:
        # populate_existing overwrites loaded state, so pending changes go out first.
        self.session.flush()
        stmt = (
            select(OrderModel)
            .options(selectinload(OrderModel.items))
            .where(OrderModel.id == order_id)
            .execution_options(populate_existing=True)
        )
        return self.session.scalar(stmt)

    def find_item(self, item_id: int) -> OrderItemModel | None:
        return self.session.get(OrderItemModel, item_id)

    def exists_by_order_number(self, order_number: str) -> bool:
        return bool(self.session.scalar(select(exists().where(OrderModel.order_number == order_number))))

    def add(self, order: OrderModel) -> OrderModel:
        self.session.add(order)
        self.session.flush()
        return order

    def add_item(self, order: OrderModel, item: OrderItemModel) -> OrderItemModel:
        order.items.append(item)
        self.session.flush()
        return item

    def save(self, order: OrderModel) -> OrderModel:
        self.session.add(order)
        self.session.flush()
        return order

    def delete(self, order: OrderModel) -> None:
        self.session.delete(order)
        self.session.flush()

    def delete_item(self, item: OrderItemModel) -> int:
        """Delete ``item`` and return the id of the order that owned it."""
        order_id = item.order_id
        self.session.delete(item)
        self.session.flush()
        parent = self.session.get(OrderModel, order_id)
        if parent is not None:
            self.session.expire(parent, ["items"])
        return order_id

    def reload(self, order: OrderModel) -> OrderModel:
        """Re-read ``order`` and its items from the database after a flush."""
        reloaded = self.find_by_id(order.id)
        if reloaded is None:
            raise LookupError(f"order {order.id} vanished inside its own transaction")
        return reloaded

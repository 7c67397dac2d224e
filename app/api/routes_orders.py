from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from pydantic import Field
from sqlalchemy.orm import Session

from app.api.presenters import order_collection, order_to_dict
from app.domain.orders.commands import (
    CreateOrderCommand,
    CreateOrderItemCommand,
    UpdateOrderStatusCommand,
)
from app.domain.orders.service import OrderService
from app.domain.orders.status import OrderStatus
from app.persistence.pg import get_session

router = APIRouter(tags=["orders"])


class CreateOrderRequest(CreateOrderCommand):
    items: list[CreateOrderItemCommand] = Field(min_length=1)


@router.get("/orders")
def list_orders(
    status: OrderStatus | None = Query(default=None),
    search: str | None = Query(default=None, max_length=255),
    page: int | None = Query(default=None, ge=1),
    per_page: int | None = Query(default=None, ge=1),
    session: Session = Depends(get_session),
):
    filters = {
        key: value
        for key, value in {"status": status, "search": search, "page": page, "per_page": per_page}.items()
        if value is not None
    }
    result = OrderService(session).list_orders(filters)
    return order_collection(result)


@router.post("/orders", status_code=201)
def create_order(payload: CreateOrderRequest, session: Session = Depends(get_session)):
    order = OrderService(session).create_order(payload)
    return {"data": order_to_dict(order)}


@router.get("/orders/{order_id}")
def get_order(order_id: int, session: Session = Depends(get_session)):
    order = OrderService(session).get_order(order_id)
    return {"data": order_to_dict(order)}


@router.patch("/orders/{order_id}/status")
def update_order_status(
    order_id: int,
    payload: UpdateOrderStatusCommand,
    session: Session = Depends(get_session),
):
    order = OrderService(session).update_status(order_id, payload.status)
    return {"data": order_to_dict(order)}


@router.delete("/orders/{order_id}")
def delete_order(order_id: int, session: Session = Depends(get_session)):
    OrderService(session).delete_order(order_id)
    return {"message": "Order deleted successfully"}

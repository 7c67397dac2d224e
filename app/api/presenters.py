from __future__ import annotations

from typing import Any

from app.api.utils import format_money, isoformat_z, pluralize
from app.domain.orders.queries import Page
from app.persistence.models import OrderItemModel, OrderModel


def item_to_dict(item: OrderItemModel) -> dict[str, Any]:
    return {
        "id": item.id,
        "order_id": item.order_id,
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": {"value": float(item.unit_price), "formatted": format_money(item.unit_price)},
        "subtotal": {"value": float(item.subtotal), "formatted": format_money(item.subtotal)},
        "created_at": isoformat_z(item.created_at),
        "updated_at": isoformat_z(item.updated_at),
    }


def order_to_dict(order: OrderModel) -> dict[str, Any]:
    return {
        "id": order.id,
        "order_number": order.order_number,
        "customer_name": order.customer_name,
        "customer_email": order.customer_email,
        "status": {
            "value": order.status.value,
            "label": order.status.label,
            "color": order.status.color,
        },
        "total_amount": {
            "value": float(order.total_amount),
            "formatted": format_money(order.total_amount),
        },
        "items_count": {
            "value": order.items_count,
            "formatted": pluralize(order.items_count, "item"),
        },
        "notes": order.notes,
        "ordered_at": isoformat_z(order.ordered_at),
        "fulfilled_at": isoformat_z(order.fulfilled_at),
        "created_at": isoformat_z(order.created_at),
        "updated_at": isoformat_z(order.updated_at),
        "items": [item_to_dict(item) for item in order.items],
    }


def order_collection(result: list[OrderModel] | Page) -> dict[str, Any]:
    if isinstance(result, Page):
        return {
            "data": [order_to_dict(order) for order in result.items],
            "meta": {
                "current_page": result.current_page,
                "from": result.from_,
                "last_page": result.last_page,
                "per_page": result.per_page,
                "to": result.to,
                "total": result.total,
            },
        }
    return {"data": [order_to_dict(order) for order in result]}

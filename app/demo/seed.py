from __future__ import annotations

import logging
import random
from datetime import timedelta
from decimal import Decimal
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.clock import now_utc
from app.domain.orders.service import OrderService
from app.domain.orders.status import OrderStatus
from app.persistence.models import OrderModel

logger = logging.getLogger(__name__)

DEMO_STATUS_COUNTS: dict[OrderStatus, int] = {
    OrderStatus.PENDING: 7,
    OrderStatus.PROCESSING: 8,
    OrderStatus.FULFILLED: 10,
    OrderStatus.CANCELLED: 5,
}

# Valid transition paths from PENDING to each demo status.
_PATHS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.PENDING: (),
    OrderStatus.PROCESSING: (OrderStatus.PROCESSING,),
    OrderStatus.FULFILLED: (OrderStatus.PROCESSING, OrderStatus.FULFILLED),
    OrderStatus.CANCELLED: (OrderStatus.CANCELLED,),
}

_FIRST_NAMES = ["Ada", "Grace", "Alan", "Edsger", "Barbara", "Donald", "Frances", "Ken", "Radia", "Linus"]
_LAST_NAMES = ["Lovelace", "Hopper", "Turing", "Dijkstra", "Liskov", "Knuth", "Allen", "Thompson", "Perlman"]
_PRODUCTS = [
    "Mechanical Keyboard",
    "USB-C Hub",
    "27in Monitor",
    "Laptop Stand",
    "Noise Cancelling Headphones",
    "Webcam",
    "Desk Lamp",
    "Ergonomic Mouse",
    "Cable Organizer",
    "Portable SSD",
]
_NOTES = ["Leave at the front desk.", "Gift wrap, please.", "Call before delivery.", None, None, None]


def _random_order(rng: random.Random) -> dict[str, Any]:
    first = rng.choice(_FIRST_NAMES)
    last = rng.choice(_LAST_NAMES)
    items = []
    for _ in range(rng.randint(1, 5)):
        cents = rng.randint(1000, 50000)
        items.append(
            {
                "product_name": rng.choice(_PRODUCTS),
                "quantity": rng.randint(1, 5),
                "unit_price": Decimal(cents) / Decimal(100),
            }
        )
    return {
        "customer_name": f"{first} {last}",
        "customer_email": f"{first}.{last}{rng.randint(1, 999)}@example.com".lower(),
        "notes": rng.choice(_NOTES),
        "items": items,
    }


def seed_orders(session: Session, seed: int | None = None, force: bool = False) -> dict[str, Any]:
    """Create the demo order set unless orders already exist (or ``force``)."""
    existing = int(session.scalar(select(func.count(OrderModel.id))) or 0)
    if existing and not force:
        return {"created": 0, "seeded_now": False, "existing": existing}

    rng = random.Random(seed)
    service = OrderService(session)
    now = now_utc()
    created: dict[str, int] = {}

    for status, count in DEMO_STATUS_COUNTS.items():
        for _ in range(count):
            order = service.create_order(_random_order(rng))
            # Spread orders over the last 90 days so listing order is meaningful.
            order.ordered_at = now - timedelta(days=rng.randint(0, 89), minutes=rng.randint(0, 1439))
            session.flush()
            for step in _PATHS[status]:
                service.update_status(order.id, step)
            created[status.value] = created.get(status.value, 0) + 1

    total = sum(created.values())
    logger.info("seeded demo orders: total=%s by_status=%s", total, created)
    return {"created": total, "seeded_now": True, "by_status": created}

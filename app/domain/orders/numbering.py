from __future__ import annotations

import re

from sqlalchemy.orm import Session

from app.persistence.models import OrderSequenceModel

ORDER_NUMBER_PREFIX = "ORD-"
ORDER_NUMBER_PATTERN = re.compile(r"^ORD-\d{6}$")


def format_order_number(sequence: int) -> str:
    if sequence < 1:
        raise ValueError("order sequence must be positive")
    return f"{ORDER_NUMBER_PREFIX}{sequence:06d}"


def generate_order_number(session: Session) -> str:
    """Mint the next order number from the ``order_sequences`` counter.

    One row is inserted per call and its autoincrement key becomes the number,
    so concurrent creators never share a value. Must run inside the same
    transaction as the order insert; a rolled-back order leaves a gap, never a
    duplicate.
    """
    row = OrderSequenceModel()
    session.add(row)
    session.flush()
    return format_order_number(row.id)

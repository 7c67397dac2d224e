from __future__ import annotations

import pytest

from app.domain.orders.status import DELETION_BLOCKERS, OrderStatus


def test_status_values_match_wire_format():
    assert OrderStatus.values() == ["pending", "processing", "fulfilled", "cancelled"]
    assert OrderStatus("processing") is OrderStatus.PROCESSING


def test_labels_and_colors():
    assert [s.label for s in OrderStatus] == ["Pending", "Processing", "Fulfilled", "Cancelled"]
    assert [s.color for s in OrderStatus] == ["yellow", "blue", "green", "red"]


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (OrderStatus.PENDING, OrderStatus.PROCESSING),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.FULFILLED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    ],
)
def test_allowed_transitions(current, target):
    assert current.can_transition_to(target)


def test_everything_else_is_rejected():
    allowed = {
        (OrderStatus.PENDING, OrderStatus.PROCESSING),
        (OrderStatus.PENDING, OrderStatus.CANCELLED),
        (OrderStatus.PROCESSING, OrderStatus.FULFILLED),
        (OrderStatus.PROCESSING, OrderStatus.CANCELLED),
    }
    for current in OrderStatus:
        for target in OrderStatus:
            if (current, target) in allowed:
                continue
            assert not current.can_transition_to(target), (current, target)


def test_terminal_states():
    assert OrderStatus.FULFILLED.is_terminal
    assert OrderStatus.CANCELLED.is_terminal
    assert not OrderStatus.PENDING.is_terminal
    assert OrderStatus.FULFILLED.allowed_transitions() == ()


def test_deletion_blockers_cover_processing_and_fulfilled_only():
    assert DELETION_BLOCKERS == {
        OrderStatus.PROCESSING: "Order is currently being processed",
        OrderStatus.FULFILLED: "Order has been fulfilled",
    }

from __future__ import annotations

from decimal import Decimal

from sqlalchemy import select

import app.persistence.pg as pg
from app.domain.orders import aggregates
from app.domain.orders.commands import MAX_QUANTITY, MAX_UNIT_PRICE
from app.domain.orders.service import OrderService
from app.persistence.models import OrderItemModel, OrderModel


def _assert_consistent(session, order_id: int) -> None:
    order = session.get(OrderModel, order_id)
    subtotals = session.scalars(select(OrderItemModel.subtotal).where(OrderItemModel.order_id == order_id)).all()
    assert order.total_amount == aggregates.to_money(sum(subtotals, Decimal("0")))
    assert order.items_count == len(subtotals)


def _create(session, items):
    return OrderService(session).create_order(
        {"customer_name": "Totals Test", "customer_email": "totals@example.com", "items": items}
    )


def test_compute_totals_is_exact():
    totals = aggregates.compute_totals([Decimal("0.10"), Decimal("0.20"), Decimal("0.30")])
    assert totals.total_amount == Decimal("0.60")
    assert totals.items_count == 3


def test_compute_totals_of_nothing():
    totals = aggregates.compute_totals([])
    assert totals.total_amount == Decimal("0.00")
    assert totals.items_count == 0


def test_create_order_sets_totals(session):
    order = _create(
        session,
        [
            {"product_name": "A", "quantity": 2, "unit_price": "10.00"},
            {"product_name": "B", "quantity": 1, "unit_price": "25.00"},
        ],
    )

    assert order.total_amount == Decimal("45.00")
    assert order.items_count == 2
    _assert_consistent(session, order.id)


def test_adding_item_recalculates(session):
    order = _create(session, [{"product_name": "A", "quantity": 1, "unit_price": "5.00"}])
    OrderService(session).add_item(order.id, {"product_name": "B", "quantity": 3, "unit_price": "2.50"})

    refreshed = OrderService(session).get_order(order.id)
    assert refreshed.total_amount == Decimal("12.50")
    assert refreshed.items_count == 2
    _assert_consistent(session, order.id)


def test_updating_item_recalculates(session):
    order = _create(session, [{"product_name": "A", "quantity": 1, "unit_price": "5.00"}])
    item_id = order.items[0].id

    item = OrderService(session).update_item(item_id, {"quantity": 4, "unit_price": "1.25"})

    assert item.subtotal == Decimal("5.00")
    assert OrderService(session).get_order(order.id).total_amount == Decimal("5.00")

    OrderService(session).update_item(item_id, {"quantity": 10})
    assert OrderService(session).get_order(order.id).total_amount == Decimal("12.50")
    _assert_consistent(session, order.id)


def test_deleting_every_item_zeroes_totals(session):
    order = _create(
        session,
        [
            {"product_name": "A", "quantity": 2, "unit_price": "10.00"},
            {"product_name": "B", "quantity": 1, "unit_price": "25.00"},
        ],
    )
    service = OrderService(session)
    for item_id in [item.id for item in order.items]:
        assert service.remove_item(item_id) == order.id

    refreshed = service.get_order(order.id)
    assert refreshed.total_amount == Decimal("0.00")
    assert refreshed.items_count == 0
    assert refreshed.items == []


def test_item_deletion_resolves_parent_by_foreign_key(configure_test_engine):
    with pg.session_scope() as session:
        order = _create(session, [{"product_name": "A", "quantity": 1, "unit_price": "9.99"}])
        order_id = order.id
        item_id = order.items[0].id

    # A fresh session where the item's parent was never loaded.
    with pg.session_scope() as session:
        OrderService(session).remove_item(item_id)

    with pg.session_scope() as session:
        order = session.get(OrderModel, order_id)
        assert order.total_amount == Decimal("0.00")
        assert order.items_count == 0


def test_recalculate_skips_unchanged_totals(session):
    order = _create(session, [{"product_name": "A", "quantity": 1, "unit_price": "3.00"}])

    assert aggregates.recalculate(session, order.id) is False
    assert aggregates.sync_loaded_totals(order) is False


def test_recalculate_repairs_drifted_totals(session):
    order = _create(session, [{"product_name": "A", "quantity": 2, "unit_price": "3.00"}])
    order.total_amount = Decimal("999.00")
    order.items_count = 7
    session.flush()

    assert aggregates.recalculate(session, order.id) is True
    assert order.total_amount == Decimal("6.00")
    assert order.items_count == 1


def test_loaded_and_queried_paths_agree(session):
    order = _create(
        session,
        [
            {"product_name": "A", "quantity": 3, "unit_price": "0.10"},
            {"product_name": "B", "quantity": 7, "unit_price": "33.33"},
        ],
    )
    from_loaded = aggregates.compute_totals(item.subtotal for item in order.items)
    from_query = aggregates.compute_totals(
        session.scalars(select(OrderItemModel.subtotal).where(OrderItemModel.order_id == order.id)).all()
    )

    assert from_loaded == from_query
    assert from_loaded.total_amount == Decimal("233.61")


def test_recalculate_for_missing_order_is_noop(session):
    assert aggregates.recalculate(session, 987654) is False


def test_total_column_is_at_least_as_wide_as_item_subtotal():
    largest_subtotal = MAX_QUANTITY * MAX_UNIT_PRICE
    integer_digits = len(str(int(largest_subtotal)))
    total_type = OrderModel.__table__.c.total_amount.type
    subtotal_type = OrderItemModel.__table__.c.subtotal.type

    assert integer_digits <= subtotal_type.precision - subtotal_type.scale
    assert total_type.scale == subtotal_type.scale
    assert total_type.precision >= subtotal_type.precision


def test_maximum_size_items_are_stored_exactly(configure_test_engine):
    biggest = {"product_name": "Bulk", "quantity": MAX_QUANTITY, "unit_price": str(MAX_UNIT_PRICE)}
    with pg.session_scope() as session:
        order_id = _create(session, [biggest, biggest]).id

    with pg.session_scope() as session:
        order = session.get(OrderModel, order_id)
        assert order.total_amount == Decimal("19997999800.02")
        assert order.items_count == 2
        _assert_consistent(session, order_id)

from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import delete

import app.persistence.pg as pg
from app.persistence.models import Base, OrderItemModel, OrderModel, OrderSequenceModel


@pytest.fixture(scope="session")
def test_db_path(tmp_path_factory: pytest.TempPathFactory) -> Path:
    return tmp_path_factory.mktemp("db") / "test.sqlite"


@pytest.fixture(scope="session", autouse=True)
def configure_test_engine(test_db_path: Path):
    engine = pg.create_engine_from_url(f"sqlite+pysqlite:///{test_db_path}")
    TestSessionLocal = pg.build_sessionmaker(engine)

    pg.engine = engine
    pg.SessionLocal = TestSessionLocal

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(autouse=True)
def clean_tables(configure_test_engine):
    with configure_test_engine.begin() as conn:
        conn.execute(delete(OrderItemModel))
        conn.execute(delete(OrderModel))
        conn.execute(delete(OrderSequenceModel))
    yield


@pytest.fixture()
def client(configure_test_engine):
    from app.main import app

    with TestClient(app) as c:
        yield c


@pytest.fixture()
def session(configure_test_engine):
    with pg.session_scope() as s:
        yield s


@pytest.fixture()
def order_payload():
    return {
        "customer_name": "John Doe",
        "customer_email": "john@example.com",
        "notes": "Ring twice",
        "items": [
            {"product_name": "Widget", "quantity": 2, "unit_price": "10.00"},
            {"product_name": "Gadget", "quantity": 1, "unit_price": "25.00"},
        ],
    }

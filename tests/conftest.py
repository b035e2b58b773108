"""Shared test fixtures."""

import os
from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import insert

os.environ.setdefault("INVOICES_LOG_LEVEL", "WARNING")

from app import app  # noqa: E402
from app.db.engine import build_engine, get_engine  # noqa: E402
from app.db.schema import customers, invoices, metadata  # noqa: E402
from app.navigation import RouteCache, get_route_cache  # noqa: E402

LEE_ID = "3958dc9e-742f-4377-85e9-fec4b6a6442a"
DELBA_ID = "3958dc9e-712f-4377-85e9-fec4b6a6442a"


class RecordingNavigator:
    """Navigator double that records calls in order."""

    def __init__(self):
        self.calls = []

    def invalidate(self, path):
        self.calls.append(("invalidate", path))

    def redirect(self, path):
        self.calls.append(("redirect", path))
        return ("redirect", path)


@pytest.fixture
def engine(tmp_path):
    """SQLite database with the schema and two customers."""
    engine = build_engine(f"sqlite:///{tmp_path / 'test.sqlite'}")
    metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(customers),
            [
                {"id": LEE_ID, "name": "Lee Robinson", "email": "lee@robinson.com"},
                {"id": DELBA_ID, "name": "Delba de Oliveira", "email": "delba@oliveira.com"},
            ],
        )
    yield engine
    engine.dispose()


@pytest.fixture
def broken_engine(tmp_path):
    """Engine on an empty database: every invoice statement fails."""
    engine = build_engine(f"sqlite:///{tmp_path / 'empty.sqlite'}")
    yield engine
    engine.dispose()


@pytest.fixture
def make_invoice(engine):
    def _make(invoice_id, customer_id=LEE_ID, amount=1000, status="pending", invoice_date=date(2023, 1, 15)):
        with engine.begin() as conn:
            conn.execute(
                insert(invoices).values(
                    id=invoice_id,
                    customer_id=customer_id,
                    amount=amount,
                    status=status,
                    date=invoice_date,
                )
            )
        return invoice_id

    return _make


@pytest.fixture
def fetch_invoices(engine):
    def _fetch():
        with engine.connect() as conn:
            rows = conn.execute(invoices.select().order_by(invoices.c.id)).mappings().all()
        return [dict(row) for row in rows]

    return _fetch


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def route_cache():
    return RouteCache()


@pytest.fixture
def client(engine, route_cache):
    app.dependency_overrides[get_engine] = lambda: engine
    app.dependency_overrides[get_route_cache] = lambda: route_cache
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()

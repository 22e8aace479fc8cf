"""Shared fixtures: in-memory database, seeded catalog and recording doubles."""

import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"

from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.api import create_app
from storefront.api.deps import get_address_client, get_notifier, get_publisher
from storefront.data.database import Base, get_db, init_db
from storefront.data.models import CouponModel, ProductModel, UserModel
from storefront.services.address_client import AddressClient


class RecordingPublisher:
    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    def kinds(self):
        return [e.kind.value for e in self.events]


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id, amount):
        self.sent.append((user_id, order_id, amount))


@pytest.fixture()
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=True)


@pytest.fixture()
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture()
def publisher():
    return RecordingPublisher()


@pytest.fixture()
def notifier():
    return RecordingNotifier()


@pytest.fixture()
def catalog(db):
    now = datetime.now(timezone.utc)
    db.add_all([
        ProductModel(id=1, title="Keyboard", price=Decimal("100.00"), quantity=10, colors=["Black", "White"]),
        ProductModel(id=2, title="Mouse", price=Decimal("49.50"), quantity=3, colors=[]),
        ProductModel(id=3, title="Monitor", price=Decimal("899.00"), quantity=3, colors=["Black"]),
    ])
    db.add_all([
        UserModel(id=1, name="Shopper", email="shopper@example.com", city="Pune", postal_code="411001"),
        UserModel(id=2, name="Admin", email="admin@example.com", role="admin", city="Pune", postal_code="411002"),
        UserModel(id=3, name="Nomad", email="nomad@example.com", city="Pune"),
    ])
    db.add_all([
        CouponModel(code="SAVE10", discount=10, expiry=now + timedelta(days=30)),
        CouponModel(code="SAVE25", discount=25, expiry=now + timedelta(days=30)),
        CouponModel(code="OLD5", discount=5, expiry=now - timedelta(days=1)),
    ])
    db.commit()
    return db


@pytest.fixture()
def client(session_factory, catalog, publisher, notifier):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_publisher] = lambda: publisher
    app.dependency_overrides[get_notifier] = lambda: notifier
    app.dependency_overrides[get_address_client] = lambda: AddressClient(base_url="")

    with TestClient(app) as c:
        yield c

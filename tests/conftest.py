import os

# must be set before storefront.utils.settings is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ORDER_REPRICE_SERVER_SIDE"] = "false"
os.environ["ORDER_TRACKING_BY_PHONE"] = "true"

from datetime import datetime, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

import storefront.data.models  # noqa: F401
from storefront.api import deps
from storefront.data.database import Base, SessionLocal, engine
from storefront.data.models import OrderItemModel, OrderModel, ProductModel
from storefront.domain.schemas import Identity
from storefront.main import create_app
from storefront.repos.cart_repo import CartSessionRepo

GOOD_TOKEN = "good-token"
OTHER_TOKEN = "other-token"


class FakeRedis:
    """The handful of redis.Redis calls CartSessionRepo makes, kept in a dict."""

    def __init__(self):
        self.store = {}
        self.ttl = {}

    def get(self, name):
        return self.store.get(name)

    def set(self, name, value, ex=None):
        self.store[name] = value
        self.ttl[name] = ex
        return True

    def delete(self, *names):
        removed = 0
        for name in names:
            if self.store.pop(name, None) is not None:
                removed += 1
            self.ttl.pop(name, None)
        return removed


class FakeIdentityClient:
    def __init__(self):
        self.users = {
            GOOD_TOKEN: Identity(id="user-1", email="sara@example.com"),
            OTHER_TOKEN: Identity(id="user-2", email="reza@example.com"),
        }
        self.calls = []

    def resolve(self, token):
        self.calls.append(token)
        if not token:
            return None
        return self.users.get(token)


class FakeNotifications:
    def __init__(self):
        self.sent = []

    def send_order_notification(self, user_id, order_id):
        self.sent.append((user_id, order_id))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def identity():
    return FakeIdentityClient()


@pytest.fixture
def notifications():
    return FakeNotifications()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(db, identity, notifications, fake_redis):
    app = create_app()
    app.dependency_overrides[deps.get_identity_client] = lambda: identity
    app.dependency_overrides[deps.get_notification_service] = lambda: notifications
    app.dependency_overrides[deps.get_cart_repo] = lambda: CartSessionRepo(client=fake_redis)
    return TestClient(app)


@pytest.fixture
def make_product(db):
    def _make(**fields):
        data = {
            "name": "محصول تست",
            "price": Decimal("100000"),
            "image_url": "/img.jpg",
        }
        data.update(fields)
        product = ProductModel(**data)
        db.add(product)
        db.commit()
        db.refresh(product)
        return product

    return _make


@pytest.fixture
def make_order(db):
    def _make(phone="09120000000", created_at=None, items=(), user_id="user-1", **fields):
        order = OrderModel(
            user_id=user_id,
            phone=phone,
            postal_code=fields.pop("postal_code", "1234567890"),
            address=fields.pop("address", "تهران، خیابان ولیعصر"),
            total_price=fields.pop("total_price", Decimal("0")),
            created_at=created_at or datetime.now(timezone.utc),
            **fields,
        )
        db.add(order)
        db.flush()
        for product_id, quantity, price in items:
            db.add(OrderItemModel(order_id=order.id, product_id=product_id, quantity=quantity, price=price))
        db.commit()
        db.refresh(order)
        return order

    return _make

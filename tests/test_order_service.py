from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from conftest import GOOD_TOKEN, OTHER_TOKEN
from storefront.data.models import OrderItemModel, OrderModel
from storefront.domain.errors import AuthError, BackendError, NotFoundError, ValidationError
from storefront.domain.schemas import OrderSubmitIn
from storefront.repos.order_repo import OrderItemsWriteError, OrderRepo
from storefront.services import order_service as order_module
from storefront.services.order_service import OrderService


@pytest.fixture
def service(db, identity, notifications):
    return OrderService(db, identity_client=identity, notification_service=notifications)


def submission(**overrides):
    data = {
        "phone": "09121112233",
        "postalCode": "1234567890",
        "address": "تهران، خیابان انقلاب، پلاک ۱۲",
        "items": [{"product_id": 7, "quantity": 2, "price": "45000"}],
    }
    data.update(overrides)
    return OrderSubmitIn.model_validate(data)


# =====================================================
# SUBMISSION
# =====================================================
def test_place_order_writes_header_and_items(db, service, notifications, make_product):
    make_product(id=7, price=Decimal("50000"), discount_percentage=10)

    result = service.place_order(submission(), GOOD_TOKEN)

    order = db.get(OrderModel, result["order_id"])
    assert result["message"] == order_module.ORDER_PLACED
    assert order.user_id == "user-1"
    assert order.status == "processing"
    assert order.shipped is False
    assert order.phone == "09121112233"
    assert order.postal_code == "1234567890"
    assert order.total_price == Decimal("90000")

    items = db.query(OrderItemModel).filter_by(order_id=order.id).all()
    assert [(i.product_id, i.quantity, i.price) for i in items] == [(7, 2, Decimal("45000"))]
    assert notifications.sent == [("user-1", order.id)]


@pytest.mark.parametrize(
    "overrides",
    [
        {"phone": None},
        {"postalCode": ""},
        {"address": "   "},
        {"items": []},
        {"items": None},
    ],
)
def test_incomplete_order_is_rejected(service, identity, overrides):
    with pytest.raises(ValidationError) as exc:
        service.place_order(submission(**overrides), GOOD_TOKEN)

    assert exc.value.message == order_module.INCOMPLETE_ORDER
    assert identity.calls == []


def test_completeness_is_checked_before_formats(service):
    with pytest.raises(ValidationError) as exc:
        service.place_order(submission(phone="123", address=""), GOOD_TOKEN)

    assert exc.value.message == order_module.INCOMPLETE_ORDER


def test_phone_is_checked_before_postal_code(service):
    with pytest.raises(ValidationError) as exc:
        service.place_order(submission(phone="9123456789", postalCode="12"), GOOD_TOKEN)

    assert exc.value.message == order_module.INVALID_PHONE


def test_postal_code_is_checked_before_auth(service, identity):
    with pytest.raises(ValidationError) as exc:
        service.place_order(submission(postalCode="123456789"), None)

    assert exc.value.message == order_module.INVALID_POSTAL_CODE
    assert identity.calls == []


def test_missing_token(service, db):
    with pytest.raises(AuthError) as exc:
        service.place_order(submission(), None)

    assert exc.value.message == order_module.TOKEN_MISSING
    assert db.query(OrderModel).count() == 0


def test_unknown_token(service, db):
    with pytest.raises(AuthError) as exc:
        service.place_order(submission(), "forged")

    assert exc.value.message == order_module.NOT_AUTHENTICATED
    assert db.query(OrderModel).count() == 0


def test_persian_digits_are_stored_normalized(db, service):
    result = service.place_order(submission(phone="۰۹۱۲۱۱۱۲۲۳۳", postalCode="۱۲۳۴۵۶۷۸۹۰"), GOOD_TOKEN)

    order = db.get(OrderModel, result["order_id"])
    assert order.phone == "09121112233"
    assert order.postal_code == "1234567890"


def test_client_prices_are_kept_by_default(db, service, make_product):
    make_product(id=7, price=Decimal("50000"), discount_percentage=10)

    result = service.place_order(
        submission(items=[{"product_id": 7, "quantity": 1, "price": "1000"}]), GOOD_TOKEN
    )

    item = db.query(OrderItemModel).filter_by(order_id=result["order_id"]).one()
    assert item.price == Decimal("1000")


def test_server_side_repricing(db, identity, notifications, make_product):
    make_product(id=7, price=Decimal("50000"), discount_percentage=10)
    service = OrderService(db, identity_client=identity, notification_service=notifications, reprice=True)

    result = service.place_order(
        submission(items=[{"product_id": 7, "quantity": 2, "price": "1000"}]), GOOD_TOKEN
    )

    item = db.query(OrderItemModel).filter_by(order_id=result["order_id"]).one()
    assert item.price == Decimal("45000")
    assert result["total_price"] == Decimal("90000")


def test_server_side_repricing_rejects_unknown_products(db, identity, notifications):
    service = OrderService(db, identity_client=identity, notification_service=notifications, reprice=True)

    with pytest.raises(ValidationError):
        service.place_order(submission(), GOOD_TOKEN)

    assert db.query(OrderModel).count() == 0


def test_line_prices_are_stored_to_two_decimals(db, service):
    result = service.place_order(
        submission(items=[{"product_id": 7, "quantity": 3, "price": "67334.33333"}]), GOOD_TOKEN
    )

    item = db.query(OrderItemModel).filter_by(order_id=result["order_id"]).one()
    assert item.price == Decimal("67334.33")
    assert result["total_price"] == Decimal("202002.99")


def test_repriced_lines_are_rounded_half_up(db, identity, notifications, make_product):
    make_product(id=7, price=Decimal("100499"), discount_percentage=33)  # 67334.33
    make_product(id=8, price=Decimal("1001"), discount_percentage=50)  # 500.5
    service = OrderService(db, identity_client=identity, notification_service=notifications, reprice=True)

    result = service.place_order(
        submission(
            items=[
                {"product_id": 7, "quantity": 1, "price": "0"},
                {"product_id": 8, "quantity": 1, "price": "0"},
            ]
        ),
        GOOD_TOKEN,
    )

    items = db.query(OrderItemModel).filter_by(order_id=result["order_id"]).order_by(OrderItemModel.product_id)
    assert [i.price for i in items] == [Decimal("67334.33"), Decimal("500.50")]
    assert result["total_price"] == Decimal("67834.83")


def test_items_failure_surfaces_as_backend_error(service, notifications, monkeypatch):
    def fail(order, items):
        raise OrderItemsWriteError(5, SQLAlchemyError("insert into order_items failed"))

    monkeypatch.setattr(service.repo, "create_order_with_items", fail)

    with pytest.raises(BackendError) as exc:
        service.place_order(submission(), GOOD_TOKEN)

    assert exc.value.message == order_module.ITEMS_WRITE_FAILED
    assert "order_items" in exc.value.detail
    assert notifications.sent == []


def test_items_failure_rolls_back_order_header(db):
    repo = OrderRepo(db)
    order = OrderModel(
        user_id="user-1", phone="09120000000", postal_code="1234567890", address="x", total_price=Decimal("1")
    )
    broken = OrderItemModel(product_id=1, quantity=None, price=Decimal("1"))

    with pytest.raises(OrderItemsWriteError) as exc:
        repo.create_order_with_items(order, [broken])

    assert exc.value.order_id is not None
    assert db.query(OrderModel).count() == 0
    assert db.query(OrderItemModel).count() == 0


# =====================================================
# TRACKING
# =====================================================
def test_track_by_order_id(service, make_product, make_order):
    make_product(id=7, name="کرم آبرسان")
    order = make_order(items=[(7, 2, Decimal("45000"))])

    result = service.track_order(str(order.id))

    assert result["id"] == order.id
    assert result["items"][0]["product_name"] == "کرم آبرسان"
    assert result["items"][0]["line_total"] == Decimal("90000")


def test_track_by_phone_returns_newest_order(service, make_order):
    t1 = datetime(2025, 1, 1, tzinfo=timezone.utc)
    older = make_order(phone="09120000000", created_at=t1)
    newer = make_order(phone="09120000000", created_at=t1 + timedelta(days=3))
    make_order(phone="09129999999", created_at=t1 + timedelta(days=9))

    result = service.track_order("09120000000")

    assert result["id"] == newer.id != older.id


def test_numeric_input_without_matching_id_is_not_found(service, make_order):
    make_order(phone="09120000000", address="42")

    with pytest.raises(NotFoundError) as exc:
        service.track_order("42")

    assert exc.value.message == order_module.ORDER_NOT_FOUND


@pytest.mark.parametrize("query", ["9" * 25, "1" * 5000, "2147483648", "0"])
def test_digits_outside_id_range_fall_through_to_phone(service, make_order, query):
    make_order(phone="09120000000")

    with pytest.raises(NotFoundError) as exc:
        service.track_order(query)

    assert exc.value.message == order_module.ORDER_NOT_FOUND


def test_largest_order_id_is_still_looked_up(service, monkeypatch):
    seen = []
    monkeypatch.setattr(service.repo, "get_order", lambda order_id: seen.append(order_id))

    with pytest.raises(NotFoundError):
        service.track_order("2147483647")

    assert seen == [2**31 - 1]


def test_unknown_phone_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.track_order("09125555555")


def test_blank_tracking_input(service):
    with pytest.raises(ValidationError):
        service.track_order("  ")


def test_tracking_accepts_persian_digits(service, make_order):
    order = make_order(phone="09121234567")

    assert service.track_order("۰۹۱۲۱۲۳۴۵۶۷")["id"] == order.id


def test_lookup_failure_looks_like_not_found(service, make_order, monkeypatch):
    make_order(phone="09120000000")

    def boom(*args):
        raise OperationalError("SELECT", {}, Exception("timeout"))

    monkeypatch.setattr(service.repo, "get_latest_order_by_phone", boom)

    with pytest.raises(NotFoundError) as exc:
        service.track_order("09120000000")

    assert exc.value.message == order_module.ORDER_NOT_FOUND


def test_phone_lookup_can_be_disabled(db, identity, notifications, make_order):
    make_order(phone="09120000000")
    service = OrderService(db, identity_client=identity, notification_service=notifications, tracking_by_phone=False)

    with pytest.raises(NotFoundError):
        service.track_order("09120000000")


# =====================================================
# ACCOUNT
# =====================================================
def test_user_orders_newest_first(service, make_order):
    t = datetime(2025, 3, 1, tzinfo=timezone.utc)
    first = make_order(created_at=t)
    second = make_order(created_at=t + timedelta(hours=1))
    other = make_order(user_id="user-2", created_at=t + timedelta(hours=2))

    orders = service.list_user_orders(GOOD_TOKEN)

    assert [o["id"] for o in orders] == [second.id, first.id]
    assert [o["id"] for o in service.list_user_orders(OTHER_TOKEN)] == [other.id]


def test_user_orders_require_token(service):
    with pytest.raises(AuthError):
        service.list_user_orders(None)

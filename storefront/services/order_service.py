# storefront/services/order_service.py
from decimal import Decimal
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.domain.errors import AuthError, BackendError, NotFoundError, ValidationError
from storefront.domain.pricing import discounted_unit_price, line_price
from storefront.domain.schemas import Identity, OrderSubmitIn
from storefront.repos.order_repo import OrderRepo, OrderItemsWriteError
from storefront.repos.product_repo import ProductRepo
from storefront.services.identity_client import IdentityClient
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import ORDER_REPRICE_SERVER_SIDE, ORDER_TRACKING_BY_PHONE
from storefront.utils.validators import is_valid_phone, is_valid_postal_code, normalize_digits
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

ORDER_PLACED = "سفارش با موفقیت ثبت شد"
INCOMPLETE_ORDER = "اطلاعات سفارش ناقص است"
INVALID_PHONE = "شماره موبایل باید با ۰۹ شروع شود و ۱۱ رقم باشد"
INVALID_POSTAL_CODE = "کد پستی باید دقیقا ۱۰ رقم باشد"
TOKEN_MISSING = "توکن احراز هویت موجود نیست"
NOT_AUTHENTICATED = "کاربر احراز هویت نشده"
ORDER_WRITE_FAILED = "خطا در ثبت سفارش"
ITEMS_WRITE_FAILED = "خطا در ثبت آیتم‌های سفارش"
ORDER_NOT_FOUND = "سفارشی با این مشخصات یافت نشد."
EMPTY_TRACKING_QUERY = "کد سفارش یا شماره تماس را وارد کنید"

# largest value the INTEGER orders.id column can hold
MAX_ORDER_ID = 2**31 - 1


class OrderService:
    """
    Order domain: checkout submission, public order tracking and the
    signed-in user's order history.
    """

    def __init__(
        self,
        db: Session,
        identity_client: IdentityClient | None = None,
        notification_service: NotificationService | None = None,
        reprice: bool = ORDER_REPRICE_SERVER_SIDE,
        tracking_by_phone: bool = ORDER_TRACKING_BY_PHONE,
    ):
        self.db = db
        self.repo = OrderRepo(db)
        self.products = ProductRepo(db)
        self.identity_client = identity_client or IdentityClient()
        self.notification_service = notification_service or NotificationService()
        self.reprice = reprice
        self.tracking_by_phone = tracking_by_phone

    def authenticate(self, token: str | None) -> Identity:
        if not token:
            raise AuthError(TOKEN_MISSING)
        identity = self.identity_client.resolve(token)
        if identity is None:
            raise AuthError(NOT_AUTHENTICATED)
        return identity

    # =====================================================
    # COMMANDS
    # =====================================================
    def place_order(self, payload: OrderSubmitIn, token: str | None) -> dict:
        """
        Use Case: checkout.

        1. Shipping fields present and at least one line
        2. Phone and postal code format
        3. Token resolves to a user
        4. Line prices fixed to two decimals, order header then its lines (one transaction)
        5. Notification (async)
        """
        phone = normalize_digits(payload.phone or "")
        postal_code = normalize_digits(payload.postal_code or "")
        address = (payload.address or "").strip()

        if not phone or not postal_code or not address or not payload.items:
            raise ValidationError(INCOMPLETE_ORDER)
        if not is_valid_phone(phone):
            raise ValidationError(INVALID_PHONE)
        if not is_valid_postal_code(postal_code):
            raise ValidationError(INVALID_POSTAL_CODE)

        identity = self.authenticate(token)

        lines = [
            {"product_id": i.product_id, "quantity": i.quantity, "price": line_price(i.price)}
            for i in payload.items
        ]
        if self.reprice:
            lines = self._reprice(lines)

        total = sum((line["price"] * line["quantity"] for line in lines), Decimal("0"))

        order = OrderModel(
            user_id=identity.id,
            phone=phone,
            postal_code=postal_code,
            address=address,
            status="processing",
            total_price=total,
        )
        items = [
            OrderItemModel(product_id=line["product_id"], quantity=line["quantity"], price=line["price"])
            for line in lines
        ]

        try:
            created = self.repo.create_order_with_items(order, items)
        except OrderItemsWriteError as e:
            logger.error(
                f"Order items insert failed for order {e.order_id} (user {identity.id}); "
                f"order header rolled back: {e.cause}"
            )
            raise BackendError(ITEMS_WRITE_FAILED, detail=str(e.cause)) from e
        except SQLAlchemyError as e:
            logger.error(f"Order insert failed for user {identity.id}: {e}")
            raise BackendError(ORDER_WRITE_FAILED, detail=str(e)) from e

        logger.info(f"Order {created.id} placed by user {identity.id} with {len(items)} items, total {total}")

        self.notification_service.send_order_notification(identity.id, created.id)

        return {"message": ORDER_PLACED, "order_id": created.id, "total_price": created.total_price}

    def _reprice(self, lines: list[dict]) -> list[dict]:
        """Replaces client prices with current discounted catalog prices."""
        try:
            catalog = self.products.get_products([line["product_id"] for line in lines])
        except SQLAlchemyError as e:
            self.db.rollback()
            raise BackendError(ORDER_WRITE_FAILED, detail=str(e)) from e

        repriced = []
        for line in lines:
            product = catalog.get(line["product_id"])
            if product is None:
                raise ValidationError(f"محصول با شناسه {line['product_id']} یافت نشد")
            price = line_price(discounted_unit_price(product.price, product.discount_percentage))
            if price != line["price"]:
                logger.warning(
                    f"Client price {line['price']} for product {product.id} differs from catalog price {price}"
                )
            repriced.append({**line, "price": price})
        return repriced

    # =====================================================
    # QUERIES
    # =====================================================
    def track_order(self, query: str | None) -> dict:
        """
        Use Case: public order tracking.

        Numeric input is tried as an order id first; if that finds nothing the
        raw input is matched against the phone number, newest order winning.
        A failed lookup and an empty one look the same to the caller.
        """
        query = normalize_digits(query or "")
        if not query:
            raise ValidationError(EMPTY_TRACKING_QUERY)

        order = None
        order_id = self._as_order_id(query)
        if order_id is not None:
            order = self._lookup("id", lambda: self.repo.get_order(order_id))

        if order is None and self.tracking_by_phone:
            order = self._lookup("phone", lambda: self.repo.get_latest_order_by_phone(query))

        if order is None:
            raise NotFoundError(ORDER_NOT_FOUND)
        return self._serialize(order)

    @staticmethod
    def _as_order_id(query: str) -> int | None:
        """Order id when the input is digits that fit the id column, else None."""
        if not (query.isascii() and query.isdigit()) or len(query) > len(str(MAX_ORDER_ID)):
            return None
        order_id = int(query)
        if not 1 <= order_id <= MAX_ORDER_ID:
            return None
        return order_id

    def _lookup(self, stage: str, fetch):
        try:
            order = fetch()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order tracking lookup by {stage} failed: {e}")
            return None
        if order is None:
            logger.info(f"Order tracking lookup by {stage}: no match")
        return order

    def list_user_orders(self, token: str | None) -> list[dict]:
        """Use Case: account page, newest order first."""
        identity = self.authenticate(token)
        try:
            orders = self.repo.list_orders_by_user(identity.id)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Order history read failed for user {identity.id}: {e}")
            raise BackendError("خطا در دریافت سفارشات", detail=str(e)) from e
        return [self._serialize(o) for o in orders]

    @staticmethod
    def _serialize(order: OrderModel) -> dict:
        return {
            "id": order.id,
            "phone": order.phone,
            "postal_code": order.postal_code,
            "address": order.address,
            "status": order.status,
            "shipped": order.shipped,
            "total_price": order.total_price,
            "created_at": order.created_at,
            "items": [
                {
                    "id": i.id,
                    "product_id": i.product_id,
                    "product_name": i.product.name if i.product else None,
                    "quantity": i.quantity,
                    "price": i.price,
                    "line_total": i.price * i.quantity,
                }
                for i in order.items
            ],
        }

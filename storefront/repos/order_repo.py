# storefront/repos/order_repo.py
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.order import OrderModel
from storefront.data.models.order_item import OrderItemModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class OrderItemsWriteError(Exception):
    """Line items could not be written after the order header was."""

    def __init__(self, order_id: int | None, cause: SQLAlchemyError):
        super().__init__(str(cause))
        self.order_id = order_id
        self.cause = cause


class OrderRepo:
    def __init__(self, db: Session):
        self.db = db

    def create_order_with_items(self, order: OrderModel, items: list[OrderItemModel]) -> OrderModel:
        """
        Writes the order header, then its lines, in one transaction.

        The header is flushed first so its generated id exists before any line
        references it. If the lines fail the whole transaction is rolled back,
        so no header is left without items.
        """
        try:
            self.db.add(order)
            self.db.flush()
        except SQLAlchemyError:
            self.db.rollback()
            raise

        order_id = order.id
        try:
            for item in items:
                item.order_id = order_id
                self.db.add(item)
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            raise OrderItemsWriteError(order_id, e) from e

        self.db.refresh(order)
        return order

    def _with_items(self):
        return select(OrderModel).options(
            selectinload(OrderModel.items).joinedload(OrderItemModel.product)
        )

    def get_order(self, order_id: int) -> OrderModel | None:
        return self.db.execute(
            self._with_items().where(OrderModel.id == order_id).limit(1)
        ).scalar_one_or_none()

    def get_latest_order_by_phone(self, phone: str) -> OrderModel | None:
        return self.db.execute(
            self._with_items()
            .where(OrderModel.phone == phone)
            .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def list_orders_by_user(self, user_id: str) -> list[OrderModel]:
        return list(
            self.db.execute(
                self._with_items()
                .where(OrderModel.user_id == user_id)
                .order_by(OrderModel.created_at.desc(), OrderModel.id.desc())
            ).scalars().all()
        )

    def find_orphan_orders(self, created_before: datetime) -> list[OrderModel]:
        """Order headers without a single line item, older than the given moment."""
        has_items = select(OrderItemModel.id).where(OrderItemModel.order_id == OrderModel.id).exists()
        return list(
            self.db.execute(
                select(OrderModel).where(
                    ~has_items,
                    OrderModel.status != "invalid",
                    OrderModel.created_at < created_before,
                )
            ).scalars().all()
        )

    def update_order_status(self, order_id: int, status: str) -> OrderModel | None:
        order = self.db.get(OrderModel, order_id)
        if order:
            order.status = status
            self.db.commit()
            self.db.refresh(order)
        return order

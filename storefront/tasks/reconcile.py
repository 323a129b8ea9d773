# storefront/tasks/reconcile.py
from datetime import datetime, timezone, timedelta

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.order_repo import OrderRepo
from storefront.utils.settings import ORPHAN_ORDER_GRACE_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def sweep_orphan_orders(db: Session, grace_seconds: int = ORPHAN_ORDER_GRACE_SECONDS) -> list[int]:
    """
    Marks order headers that never received line items as "invalid".

    Checkout writes header and items in one transaction, so orphans only come
    from stores without transactions or from rows written out-of-band.
    Returns the ids that were marked.
    """
    repo = OrderRepo(db)
    cutoff = datetime.now(timezone.utc) - timedelta(seconds=grace_seconds)

    orphans = repo.find_orphan_orders(cutoff)
    logger.info(f"Found {len(orphans)} orphan orders")

    marked = []
    for order in orphans:
        logger.warning(f"Order {order.id} (user {order.user_id}) has no items, marking invalid")
        repo.update_order_status(order.id, "invalid")
        marked.append(order.id)
    return marked


@celery_app.task(name="storefront.tasks.reconcile.sweep_orphan_orders_task")
def sweep_orphan_orders_task():
    logger.info("Orphan order sweep started")

    db = SessionLocal()
    try:
        return sweep_orphan_orders(db)
    finally:
        db.close()

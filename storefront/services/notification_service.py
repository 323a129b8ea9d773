# storefront/services/notification_service.py
from kombu.exceptions import OperationalError

from storefront.celery_worker import celery_app
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Order notifications for the fulfilment team.
    Delivered asynchronously through Celery.
    """

    @staticmethod
    def send_order_notification(user_id: str, order_id: int):
        """
        Queues the "order received" notification. The order is already
        committed at this point, so a broker outage is only logged.
        """
        try:
            send_order_notification_task.delay(user_id, order_id)
        except OperationalError as e:
            logger.warning(f"Could not queue notification for order {order_id}: {e}")


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: str, order_id: int):
    """
    Celery task. A real deployment would send an SMS to the shop operator here;
    for now the order is only logged for manual fulfilment.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: order {order_id} received, awaiting fulfilment")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}

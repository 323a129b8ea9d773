# storefront/celery_worker.py
from celery import Celery

from storefront.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# tasks have to be imported explicitly so the worker registers them
celery_app.conf.imports = (
    "storefront.tasks.reconcile",
    "storefront.services.notification_service",
)

celery_app.conf.beat_schedule = {
    "sweep-orphan-orders-every-5-minutes": {
        "task": "storefront.tasks.reconcile.sweep_orphan_orders_task",
        "schedule": 300.0,
    },
}

celery_app.conf.timezone = "UTC"

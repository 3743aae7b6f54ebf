# app/celery_worker.py
from celery import Celery

from app.utils.settings import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_ALWAYS_EAGER,
    DISCOUNT_SWEEP_SECONDS,
)

celery_app = Celery(
    "storefront",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAZNE: explicite importuj taski, zeby Celery je zarejestrowal
celery_app.conf.imports = (
    "app.tasks.discounts",
    "app.services.notification_service",
)

# Okna rabatow otwieraja sie i zamykaja tylko z uplywem czasu, bez zadnego zapisu
celery_app.conf.beat_schedule = {
    "sweep-discount-windows": {
        "task": "app.tasks.discounts.sweep_discount_windows_task",
        "schedule": DISCOUNT_SWEEP_SECONDS,
    },
}

celery_app.conf.timezone = "UTC"
celery_app.conf.task_always_eager = CELERY_TASK_ALWAYS_EAGER

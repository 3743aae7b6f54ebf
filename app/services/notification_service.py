# app/services/notification_service.py
from typing import Optional

from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysylania powiadomien do klientow.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_delivered(order_id: str, email: Optional[str]):
        send_order_delivered_task.delay(order_id, email)


@celery_app.task(name="app.services.notification_service.send_order_delivered_task")
def send_order_delivered_task(order_id: str, email: Optional[str]):
    """
    Celery task - tylko loguje, bez dostawcy email.
    """
    if not email:
        logger.info(f"[NOTIFICATION] Order {order_id} delivered, no customer email on file")
        return {"order_id": order_id, "status": "skipped"}

    logger.info(f"[NOTIFICATION] {email}: Order {order_id} has been delivered")
    return {"order_id": order_id, "email": email, "status": "sent"}

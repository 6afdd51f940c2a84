# market/services/notification_service.py
from market.celery_worker import celery_app
from market.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """Purchase receipts, processed out of band by Celery."""

    @staticmethod
    def send_purchase_receipt(user_id: int, order_id: int):
        """
        Queues the receipt. Called after the order is committed, so a
        broker outage is logged and never affects the purchase.
        """
        try:
            send_purchase_receipt_task.delay(user_id, order_id)
        except Exception:
            logger.exception(f"Could not queue receipt for order {order_id}")


@celery_app.task(name="market.services.notification_service.send_purchase_receipt_task")
def send_purchase_receipt_task(user_id: int, order_id: int):
    # email delivery hooks in here
    logger.info(f"[RECEIPT] User {user_id}: order {order_id} completed, books added to library")
    return {"user_id": user_id, "order_id": order_id, "status": "sent"}

# storefront/services/notification_service.py
from decimal import Decimal

from kombu.exceptions import KombuError

from storefront.celery_worker import celery_app
from storefront.utils.settings import CURRENCY
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def order_placed_message(order_id: int, amount: Decimal, currency: str = CURRENCY) -> str:
    return (
        f"Dear User, your order has been placed successfully. "
        f"Order ID: {order_id}, Amount: {amount} {currency}. "
        f"Thank you for shopping with us!"
    )


class NotificationService:
    """
    Serwis do wysylania powiadomien.
    Uzywa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_order_notification(user_id: int, order_id: int, amount: Decimal):
        """
        Wysyla powiadomienie o zlozeniu zamowienia.
        Zamowienie jest juz zapisane, wiec blad brokera tylko logujemy.
        """
        try:
            return send_order_notification_task.delay(user_id, order_id, str(amount))
        except KombuError as e:
            logger.warning(f"Could not enqueue notification for order {order_id}: {e}")
            return None


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, amount: str):
    """
    Celery task - w prawdziwym systemie wyslalby SMS/email.
    Teraz tylko loguje.
    """
    message = order_placed_message(order_id, Decimal(amount))
    logger.info(f"[NOTIFICATION] User {user_id}: {message}")

    return {"user_id": user_id, "order_id": order_id, "status": "sent"}

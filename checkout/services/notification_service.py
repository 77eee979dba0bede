# checkout/services/notification_service.py
from checkout.celery_worker import celery_app
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def order_placed(user_id: int, order_id: int):
        send_order_notification_task.delay(user_id, order_id, "placed")

    @staticmethod
    def payment_settled(user_id: int, order_id: int, payment_status: str):
        send_order_notification_task.delay(user_id, order_id, f"payment_{payment_status}")


def notify_after_commit(send, *args):
    """
    Wysyla powiadomienie po zapisie w bazie.
    Zamowienie juz jest zapisane, wiec blad brokera tylko logujemy.
    """
    try:
        send(*args)
    except Exception as e:
        logger.error(f"Nie wyslano powiadomienia {getattr(send, '__name__', send)} {args}: {e}")


@celery_app.task(name="checkout.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int, event: str):
    """
    Celery task - w prawdziwym systemie wysłałby email/SMS/push.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: Order {order_id} -> {event}")
    return {"user_id": user_id, "order_id": order_id, "event": event, "status": "sent"}

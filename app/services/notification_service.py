# app/services/notification_service.py
from app.celery_worker import celery_app
from app.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Serwis do wysyłania powiadomień.
    Używa Celery do asynchronicznego przetwarzania.
    """

    @staticmethod
    def send_points_notification(user_id: int, amount: int, cause: str):
        """
        Wysyła powiadomienie o naliczeniu punktów.
        """
        send_points_notification_task.delay(user_id, amount, cause)


@celery_app.task(name="app.services.notification_service.send_points_notification_task")
def send_points_notification_task(user_id: int, amount: int, cause: str):
    """
    Celery task - w prawdziwym systemie wysłałby push/email.
    Teraz tylko loguje.
    """
    logger.info(f"[NOTIFICATION] User {user_id}: {amount:+d} points ({cause})")

    return {"user_id": user_id, "amount": amount, "cause": cause, "status": "sent"}

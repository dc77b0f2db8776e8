# app/celery_worker.py
from celery import Celery

from app.utils.settings import CELERY_BROKER_URL, CELERY_RESULT_BACKEND

celery_app = Celery(
    "marketplace",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
)

# WAŻNE: Explicite importuj taski, żeby Celery je zarejestrował
celery_app.conf.imports = (
    "app.tasks.points",
    "app.services.notification_service",
)

# Konfiguracja beat schedule
celery_app.conf.beat_schedule = {
    "audit-points-every-hour": {
        "task": "app.tasks.points.audit_points_task",
        "schedule": 3600.0,  # co godzine
    },
}

celery_app.conf.timezone = "UTC"

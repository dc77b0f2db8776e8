# app/tasks/points.py
from app.celery_worker import celery_app
from app.data.database import SessionLocal
from app.domain.errors import ConcurrentModification, StoreUnavailable
from app.services.cart_service import CartService
from app.services.lock_service import LockService
from app.services.order_service import OrderService
from app.services.points_auditor import PointsAuditor
from app.services.points_ledger import PointsLedger
from app.services.product_client import ProductClient
from app.utils.settings import AUDIT_SWEEP_LIMIT
from app.utils.logging import get_logger

logger = get_logger(__name__)
lock_service = LockService()


@celery_app.task(
    name="app.tasks.points.confirm_purchase_task",
    autoretry_for=(StoreUnavailable, ConcurrentModification),
    retry_backoff=True,
    max_retries=5,
)
def confirm_purchase_task(order_id: int):
    """Potwierdzenie zakupu z zewnetrznego zdarzenia - powtorki sa bezpieczne."""
    logger.info(f"Confirm purchase task started for order {order_id}")

    db = SessionLocal()
    try:
        ledger = PointsLedger(db, lock_service)
        cart_service = CartService(db, ProductClient(), lock_service)
        order = OrderService(db, cart_service, ledger).confirm_order(order_id)
        return {"order_id": order.id, "status": order.status}
    finally:
        db.close()


@celery_app.task(name="app.tasks.points.audit_points_task")
def audit_points_task(limit: int = AUDIT_SWEEP_LIMIT):
    """Okresowy przeglad sald - tylko raport, naprawa na wyrazne zadanie."""
    logger.info("Audit points task started")

    db = SessionLocal()
    try:
        auditor = PointsAuditor(db, PointsLedger(db, lock_service))
        discrepancies = auditor.audit_all(limit)
        return [
            {
                "user_id": r.user_id,
                "difference": r.difference,
                "duplicate_transactions": r.duplicate_transactions,
            }
            for r in discrepancies
        ]
    finally:
        db.close()

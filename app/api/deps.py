# app/api/deps.py
from fastapi import Depends
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.services.cart_service import CartService
from app.services.lock_service import LockService
from app.services.points_auditor import PointsAuditor
from app.services.points_ledger import PointsLedger
from app.services.product_client import ProductClient
from app.services.referral_service import ReferralService


def get_product_client() -> ProductClient:
    return ProductClient()


def get_lock_service() -> LockService:
    return LockService()


def get_cart_service(
    db: Session = Depends(get_db),
    product_client: ProductClient = Depends(get_product_client),
    lock_service: LockService = Depends(get_lock_service),
) -> CartService:
    return CartService(db=db, product_client=product_client, lock_service=lock_service)


def get_ledger(
    db: Session = Depends(get_db),
    lock_service: LockService = Depends(get_lock_service),
) -> PointsLedger:
    return PointsLedger(db, lock_service)


def get_auditor(
    db: Session = Depends(get_db),
    ledger: PointsLedger = Depends(get_ledger),
) -> PointsAuditor:
    return PointsAuditor(db, ledger)


def get_referral_service(
    db: Session = Depends(get_db),
    ledger: PointsLedger = Depends(get_ledger),
) -> ReferralService:
    return ReferralService(db, ledger)

# app/api/routers/points.py
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_auditor, get_ledger
from app.domain.schemas import (
    AdjustIn,
    AuditResult,
    LedgerResult,
    RedeemIn,
    TransactionPage,
    TransactionSummary,
)
from app.services.points_auditor import PointsAuditor
from app.services.points_ledger import PointsLedger

router = APIRouter(prefix="/points", tags=["points"])


@router.get("/{user_id}/balance")
def get_balance(user_id: int, ledger: PointsLedger = Depends(get_ledger)):
    return {"user_id": user_id, "points_balance": ledger.get_balance(user_id)}


@router.get("/{user_id}/transactions", response_model=TransactionPage)
def list_transactions(
    user_id: int,
    page: int = Query(1),
    page_size: int = Query(20),
    ledger: PointsLedger = Depends(get_ledger),
):
    items, total = ledger.list_transactions(user_id, page, page_size)
    return TransactionPage(items=items, total=total)


@router.post("/{user_id}/redeem", response_model=LedgerResult)
def redeem(user_id: int, payload: RedeemIn, ledger: PointsLedger = Depends(get_ledger)):
    return ledger.redeem(
        user_id,
        payload.points,
        reference_id=payload.reference_id,
        description=payload.description,
    )


@router.post("/{user_id}/adjust", response_model=LedgerResult)
def adjust(user_id: int, payload: AdjustIn, ledger: PointsLedger = Depends(get_ledger)):
    return ledger.adjust(
        user_id,
        payload.amount,
        payload.reason,
        reference_id=payload.reference_id,
    )


@router.get("/{user_id}/summary", response_model=TransactionSummary)
def summary(user_id: int, auditor: PointsAuditor = Depends(get_auditor)):
    return auditor.calculate_transaction_summary(user_id)


@router.get("/{user_id}/audit", response_model=AuditResult)
def audit(user_id: int, auditor: PointsAuditor = Depends(get_auditor)):
    return auditor.audit_user_points(user_id)


@router.post("/{user_id}/audit/fix", response_model=AuditResult)
def audit_fix(user_id: int, auditor: PointsAuditor = Depends(get_auditor)):
    return auditor.auto_fix_discrepancies(user_id)

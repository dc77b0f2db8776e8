# app/api/routers/referrals.py
from fastapi import APIRouter, Depends

from app.api.deps import get_referral_service
from app.domain.schemas import ReferralApplyIn, ReferralInfoOut
from app.services.referral_service import ReferralService

router = APIRouter(prefix="/referrals", tags=["referrals"])


@router.post("/")
def apply_code(payload: ReferralApplyIn, svc: ReferralService = Depends(get_referral_service)):
    created = svc.process_referral(payload.user_id, payload.code)
    return {"applied": created}


@router.get("/{user_id}", response_model=ReferralInfoOut)
def referral_info(user_id: int, svc: ReferralService = Depends(get_referral_service)):
    return svc.referral_info(user_id)


@router.post("/{user_id}/approve")
def approve(user_id: int, svc: ReferralService = Depends(get_referral_service)):
    """Reczne zatwierdzenie polecenia (normalnie przy potwierdzeniu zakupu)."""
    return {"approved": svc.approve_referral(user_id)}

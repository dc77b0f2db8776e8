# app/repos/referral_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update

from app.data.models.referral import ReferralModel
from app.domain.enums import ReferralStatus
from app.repos.base import BaseRepo, store_call


class ReferralRepo(BaseRepo):

    @store_call
    def get_by_referred(self, referred_id: int) -> ReferralModel | None:
        stmt = select(ReferralModel).where(ReferralModel.referred_id == referred_id)
        return self.db.execute(stmt).scalar_one_or_none()

    @store_call
    def list_by_referrer(self, referrer_id: int) -> list[ReferralModel]:
        stmt = (
            select(ReferralModel)
            .where(ReferralModel.referrer_id == referrer_id)
            .order_by(ReferralModel.created_at.desc(), ReferralModel.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    @store_call
    def create(self, referral: ReferralModel) -> ReferralModel:
        self.db.add(referral)
        self.db.commit()
        self.db.refresh(referral)
        return referral

    @store_call
    def transition(self, referral_id: int, from_status: ReferralStatus, to_status: ReferralStatus) -> int:
        #straznik na kolumnie status - drugi raz rowcount 0
        values = {"status": to_status.value}
        if to_status is ReferralStatus.APPROVED:
            values["approved_at"] = datetime.now(timezone.utc)

        stmt = (
            update(ReferralModel)
            .where(ReferralModel.id == referral_id, ReferralModel.status == from_status.value)
            .values(**values)
        )
        return self.db.execute(stmt).rowcount

    @store_call
    def refresh(self, referral: ReferralModel) -> ReferralModel:
        self.db.refresh(referral)
        return referral

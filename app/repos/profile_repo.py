# app/repos/profile_repo.py
from sqlalchemy import select, update

from app.data.models.profile import ProfileModel
from app.repos.base import BaseRepo, store_call


class ProfileRepo(BaseRepo):

    @store_call
    def get_profile(self, user_id: int) -> ProfileModel | None:
        return self.db.get(ProfileModel, user_id)

    @store_call
    def get_by_referral_code(self, code: str) -> ProfileModel | None:
        stmt = select(ProfileModel).where(ProfileModel.referral_code == code)
        return self.db.execute(stmt).scalar_one_or_none()

    @store_call
    def create_profile(self, profile: ProfileModel) -> ProfileModel:
        self.db.add(profile)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    @store_call
    def set_referral_code(self, user_id: int, code: str) -> int:
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == user_id, ProfileModel.referral_code.is_(None))
            .values(referral_code=code)
        )
        return self.db.execute(stmt).rowcount

    @store_call
    def read_balance(self, user_id: int) -> int | None:
        #zawsze swiezy odczyt z bazy, z pominieciem obiektu w sesji
        stmt = select(ProfileModel.points_balance).where(ProfileModel.id == user_id)
        return self.db.execute(stmt).scalar_one_or_none()

    @store_call
    def increment_balance(self, user_id: int, amount: int) -> int:
        #atomowo po stronie bazy: set points_balance = points_balance + :amount
        stmt = (
            update(ProfileModel)
            .where(ProfileModel.id == user_id)
            .values(points_balance=ProfileModel.points_balance + amount)
        )
        return self.db.execute(stmt).rowcount

    @store_call
    def list_profile_ids(self, limit: int) -> list[int]:
        stmt = select(ProfileModel.id).order_by(ProfileModel.id).limit(limit)
        return list(self.db.execute(stmt).scalars().all())

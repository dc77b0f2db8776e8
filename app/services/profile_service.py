import secrets
import string

from sqlalchemy.orm import Session

from app.data.models.profile import ProfileModel
from app.domain.errors import NotFound
from app.domain.schemas import ProfileCreate, ProfileOut
from app.repos.profile_repo import ProfileRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

_CODE_ALPHABET = string.ascii_uppercase + string.digits
CODE_LENGTH = 6


def generate_referral_code() -> str:
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(CODE_LENGTH))


class ProfileService:
    def __init__(self, db: Session):
        self.repo = ProfileRepo(db)

    def create_profile(self, payload: ProfileCreate) -> ProfileOut:
        existing = self.repo.get_profile(payload.id)
        if existing:
            return ProfileOut.model_validate(existing)

        profile = ProfileModel(
            id=payload.id,
            name=payload.name,
            referral_code=self._unused_code(),
            points_balance=0,
        )
        created = self.repo.create_profile(profile)
        logger.info(f"Utworzono profil {created.id} z kodem {created.referral_code}")
        return ProfileOut.model_validate(created)

    def get_profile(self, user_id: int) -> ProfileOut:
        profile = self.repo.get_profile(user_id)
        if not profile:
            raise NotFound(f"Profil {user_id} nie istnieje")
        return ProfileOut.model_validate(profile)

    def ensure_referral_code(self, user_id: int) -> str:
        profile = self.repo.get_profile(user_id)
        if not profile:
            raise NotFound(f"Profil {user_id} nie istnieje")
        if profile.referral_code:
            return profile.referral_code

        self.repo.set_referral_code(user_id, self._unused_code())
        self.repo.commit()
        #set_referral_code nie nadpisuje kodu ustawionego rownolegle
        return self.repo.get_profile(user_id).referral_code

    def _unused_code(self) -> str:
        while True:
            code = generate_referral_code()
            if self.repo.get_by_referral_code(code) is None:
                return code

# app/services/referral_service.py
from sqlalchemy.orm import Session

from app.data.models.referral import ReferralModel
from app.domain.enums import PointsCause, ReferralStatus
from app.domain.errors import InvalidCode, NotFound, SelfReferral
from app.domain.schemas import ReferralInfoOut, ReferralOut
from app.repos.profile_repo import ProfileRepo
from app.repos.referral_repo import ReferralRepo
from app.services.points_ledger import PointsLedger
from app.services.profile_service import ProfileService
from app.utils.settings import REFERRAL_POINTS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class ReferralService:
    """
    Polecenia: rekord pendente przy rejestracji, jednorazowe przejscie do aprovado
    przy potwierdzeniu zakupu i dwa wpisy indicacao w ksiedze (po jednym na strone).
    """

    def __init__(self, db: Session, ledger: PointsLedger, points: int = REFERRAL_POINTS):
        self.repo = ReferralRepo(db)
        self.profiles = ProfileRepo(db)
        self.profile_service = ProfileService(db)
        self.ledger = ledger
        self.points = points

    def process_referral(self, new_user_id: int, code: str) -> bool:
        owner = self.profiles.get_by_referral_code(code.strip().upper())
        if owner is None:
            raise InvalidCode()

        if owner.id == new_user_id:
            raise SelfReferral()

        if self.profiles.get_profile(new_user_id) is None:
            raise NotFound(f"Profil {new_user_id} nie istnieje")

        if self.repo.get_by_referred(new_user_id) is not None:
            logger.info(f"Uzytkownik {new_user_id} zostal juz polecony, pomijam kod {code}")
            return False

        referral = self.repo.create(
            ReferralModel(
                referrer_id=owner.id,
                referred_id=new_user_id,
                status=ReferralStatus.PENDING.value,
                points=self.points,
            )
        )
        logger.info(
            f"Polecenie {referral.id}: {owner.id} -> {new_user_id} ({self.points} pkt), pendente"
        )
        return True

    def approve_referral(self, referred_user_id: int) -> bool:
        """
        Wywolywane przy potwierdzeniu zakupu. Zwraca True gdy nastapilo przejscie.

        Powtorka zdarzenia: status juz aprovado -> brak przejscia, a wpisy w ksiedze
        z tymi samymi reference_id sa no-op (dopisze tylko brakujace po awarii).
        """
        referral = self.repo.get_by_referred(referred_user_id)
        if referral is None:
            return False

        transitioned = False
        target = ReferralStatus(referral.status).approve()
        if target is not None:
            rowcount = self.repo.transition(referral.id, ReferralStatus.PENDING, target)
            self.repo.commit()
            transitioned = rowcount == 1
            referral = self.repo.refresh(referral)

        if referral.status != ReferralStatus.APPROVED.value:
            return False

        self._award(referral)
        if transitioned:
            logger.info(f"Polecenie {referral.id} zatwierdzone")
        return transitioned

    def _award(self, referral: ReferralModel) -> None:
        self.ledger.record_transaction(
            referral.referrer_id,
            referral.points,
            PointsCause.REFERRAL,
            reference_id=f"{referral.id}:referrer",
            description="Punkty za zatwierdzone polecenie",
        )
        self.ledger.record_transaction(
            referral.referred_id,
            referral.points,
            PointsCause.REFERRAL,
            reference_id=f"{referral.id}:referred",
            description="Punkty za pierwszy zakup z kodem polecajacym",
        )

    def referral_info(self, user_id: int) -> ReferralInfoOut:
        code = self.profile_service.ensure_referral_code(user_id)
        balance = self.profiles.read_balance(user_id)
        referrals = self.repo.list_by_referrer(user_id)

        approved = [r for r in referrals if r.status == ReferralStatus.APPROVED.value]
        return ReferralInfoOut(
            code=code,
            points_balance=balance or 0,
            total_referrals=len(referrals),
            pending_referrals=sum(1 for r in referrals if r.status == ReferralStatus.PENDING.value),
            approved_referrals=len(approved),
            points_earned=sum(r.points for r in approved),
            referrals=[ReferralOut.model_validate(r) for r in referrals],
        )

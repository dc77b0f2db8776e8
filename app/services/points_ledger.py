# app/services/points_ledger.py
"""
Ksiega punktow: dopisywanie podpisanych transakcji + cache salda w profilu.

Wiersz transakcji jest zrodlem prawdy. Cache (profiles.points_balance) jest
zwiekszany w tym samym kroku, ale jesli to sie nie uda, zostaje rozjazd,
ktory wykryje i naprawi PointsAuditor.
"""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.data.models.points_transaction import PointsTransactionModel
from app.domain.enums import PointsCause
from app.domain.errors import InsufficientPoints, InvalidQuantity, NotFound, StoreUnavailable
from app.domain.points import transaction_balance
from app.domain.schemas import LedgerResult, PointsTransactionOut
from app.repos.points_repo import PointsRepo
from app.repos.profile_repo import ProfileRepo
from app.services.lock_service import LockService
from app.utils.logging import get_logger

logger = get_logger(__name__)


class PointsLedger:
    """Zapis do ksiegi punktow, jeden pisarz na uzytkownika (lock)."""

    def __init__(self, db: Session, lock_service: LockService) -> None:
        self.repo = PointsRepo(db)
        self.profiles = ProfileRepo(db)
        self.lock_service = lock_service

    def record_transaction(
        self,
        user_id: int,
        amount: int,
        cause: PointsCause | str,
        reference_id: str | None = None,
        description: str | None = None,
    ) -> LedgerResult:
        """Dopisuje transakcje. Ten sam (user, cause, reference_id) drugi raz to no-op."""
        cause = PointsCause(cause)
        if amount == 0:
            raise InvalidQuantity("Transakcja punktow nie moze miec wartosci 0")

        with self.lock_service.user_lock(user_id):
            return self.append(user_id, amount, cause, reference_id, description)

    def append(
        self,
        user_id: int,
        amount: int,
        cause: PointsCause | str,
        reference_id: str | None = None,
        description: str | None = None,
    ) -> LedgerResult:
        """
        Zapis bez brania locka - wywolujacy musi juz trzymac user_lock(user_id).
        Lock nie jest reentrant, dlatego audytor laczy odczyt i zapis tutaj.
        """
        cause = PointsCause(cause)
        if self.profiles.get_profile(user_id) is None:
            raise NotFound(f"Profil {user_id} nie istnieje")

        if reference_id is not None:
            existing = self.repo.find_by_reference(user_id, cause.value, reference_id)
            if existing:
                logger.info(
                    f"Transakcja {cause.value}/{reference_id} uzytkownika {user_id} "
                    f"juz istnieje ({existing.id}), pomijam"
                )
                return LedgerResult(
                    transaction=PointsTransactionOut.model_validate(existing),
                    created=False,
                )

        if amount < 0 and cause is not PointsCause.AUTO_ADJUSTMENT:
            #decyzja na saldzie z transakcji, cache moze byc nieaktualny
            balance = transaction_balance(self.repo.list_all(user_id))
            if balance + amount < 0:
                raise InsufficientPoints(balance, -amount)

        tx = self.repo.insert(
            PointsTransactionModel(
                user_id=user_id,
                amount=amount,
                cause=cause.value,
                reference_id=reference_id,
                description=description,
            )
        )
        self._apply_to_cache(user_id, amount, tx.id)

        logger.info(
            f"Zapisano transakcje {tx.id}: uzytkownik {user_id}, {amount:+d} pkt ({cause.value})"
        )
        return LedgerResult(transaction=PointsTransactionOut.model_validate(tx), created=True)

    def _apply_to_cache(self, user_id: int, amount: int, tx_id: int) -> None:
        try:
            self.profiles.increment_balance(user_id, amount)
            self.profiles.commit()
        except StoreUnavailable:
            #wiersz transakcji zostaje, rozjazd naprawi audyt
            logger.warning(
                f"Nie udalo sie zaktualizowac salda uzytkownika {user_id} "
                f"po transakcji {tx_id}, do uzgodnienia przez audyt"
            )

    def redeem(
        self,
        user_id: int,
        points: int,
        reference_id: str | None = None,
        description: str | None = None,
    ) -> LedgerResult:
        if points <= 0:
            raise InvalidQuantity("Liczba punktow do wymiany musi byc wieksza niz 0")
        return self.record_transaction(
            user_id,
            -points,
            PointsCause.REDEMPTION,
            reference_id=reference_id,
            description=description or "Wymiana punktow",
        )

    def adjust(
        self,
        user_id: int,
        amount: int,
        reason: str,
        reference_id: str | None = None,
    ) -> LedgerResult:
        """Reczna korekta (np. przez sprzedawce lub admina)."""
        return self.record_transaction(
            user_id,
            amount,
            PointsCause.MANUAL_ADJUSTMENT,
            reference_id=reference_id,
            description=f"Korekta punktow: {reason}",
        )

    def get_balance(self, user_id: int) -> int:
        """Saldo z cache profilu - do wyswietlania, nie do decyzji."""
        balance = self.profiles.read_balance(user_id)
        if balance is None:
            raise NotFound(f"Profil {user_id} nie istnieje")
        return balance

    def list_transactions(
        self, user_id: int, page: int = 1, page_size: int = 20
    ) -> tuple[list[PointsTransactionOut], int]:
        items, total = self.repo.list_page(user_id, page, page_size)
        return [PointsTransactionOut.model_validate(tx) for tx in items], total

# app/services/points_auditor.py
"""
Audyt punktow: saldo liczone od nowa z transakcji vs cache w profilu.

Rozjazdy i duplikaty zwracane jako dane (status "discrepancy"), nigdy jako wyjatek.
Naprawa tylko na wyrazne wywolanie auto_fix_discrepancies - dopisuje jeden wiersz
ajuste-automatico, historii nie edytuje.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.domain.enums import PointsCause
from app.domain.errors import NotFound
from app.domain.points import (
    balance_rows,
    duplicate_count,
    summarize_transactions,
    transaction_balance,
)
from app.domain.schemas import AuditDetails, AuditResult, TransactionSummary
from app.repos.points_repo import PointsRepo
from app.repos.profile_repo import ProfileRepo
from app.services.points_ledger import PointsLedger
from app.utils.settings import AUDIT_SWEEP_LIMIT
from app.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_OK = "ok"
STATUS_DISCREPANCY = "discrepancy"


class PointsAuditor:
    def __init__(self, db: Session, ledger: PointsLedger) -> None:
        self.repo = PointsRepo(db)
        self.profiles = ProfileRepo(db)
        self.ledger = ledger

    def calculate_transaction_summary(self, user_id: int) -> TransactionSummary:
        """Suma zdobytych vs wymienionych punktow, niezalezna od cache."""
        return summarize_transactions(self.repo.list_all(user_id))

    def audit_user_points(self, user_id: int) -> AuditResult:
        profile_balance = self.profiles.read_balance(user_id)
        if profile_balance is None:
            raise NotFound(f"Profil {user_id} nie istnieje")

        transactions = self.repo.list_all(user_id)
        computed = transaction_balance(transactions)
        duplicates = duplicate_count(transactions)
        #details z tych samych wierszy co saldo: earned - redeemed == transaction_balance
        summary = summarize_transactions(balance_rows(transactions))

        difference = profile_balance - computed
        status = STATUS_OK if difference == 0 and duplicates == 0 else STATUS_DISCREPANCY

        if status != STATUS_OK:
            logger.warning(
                f"Audyt punktow uzytkownika {user_id}: profil {profile_balance}, "
                f"transakcje {computed}, roznica {difference}, duplikaty {duplicates}"
            )

        return AuditResult(
            user_id=user_id,
            profile_balance=profile_balance,
            transaction_balance=computed,
            difference=difference,
            duplicate_transactions=duplicates,
            status=status,
            details=AuditDetails(
                total_earned=summary.total_earned,
                total_redeemed=summary.total_redeemed,
                audit_timestamp=datetime.now(timezone.utc),
            ),
        )

    def auto_fix_discrepancies(self, user_id: int) -> AuditResult:
        """Odczyt roznicy, korekta i ponowny audyt pod jednym lockiem uzytkownika."""
        with self.ledger.lock_service.user_lock(user_id):
            audit = self.audit_user_points(user_id)
            if audit.difference == 0:
                logger.info(f"Uzytkownik {user_id}: brak rozjazdu salda, nic do poprawy")
                return audit

            self.ledger.append(
                user_id,
                -audit.difference,
                PointsCause.AUTO_ADJUSTMENT,
                reference_id=f"audit:{uuid.uuid4().hex}",
                description=(
                    f"Korekta automatyczna: profil {audit.profile_balance}, "
                    f"transakcje {audit.transaction_balance}"
                ),
            )

            #ponowny odczyt - cache powinien zbiec do salda z transakcji
            fixed = self.audit_user_points(user_id)

        logger.info(
            f"Uzytkownik {user_id}: saldo skorygowane o {-audit.difference}, "
            f"nowa roznica {fixed.difference}"
        )
        return fixed

    def audit_all(self, limit: int = AUDIT_SWEEP_LIMIT) -> list[AuditResult]:
        """Przeglad wielu profili (zadanie okresowe) - tylko raport, bez naprawy."""
        results = []
        for user_id in self.profiles.list_profile_ids(limit):
            result = self.audit_user_points(user_id)
            if result.status != STATUS_OK:
                results.append(result)

        logger.info(f"Audyt punktow: {len(results)} profili z rozjazdem")
        return results

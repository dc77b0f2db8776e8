import pytest

from app.domain.enums import PointsCause
from app.domain.errors import InsufficientPoints, InvalidQuantity, NotFound, StoreUnavailable
from app.repos.points_repo import PointsRepo
from app.repos.profile_repo import ProfileRepo


def _rows(db, user_id):
    return PointsRepo(db).list_all(user_id)


def test_record_appends_row_and_moves_cached_balance(db, ledger, make_profile):
    make_profile(1)

    result = ledger.record_transaction(1, 50, PointsCause.PURCHASE, reference_id="order:1")

    assert result.created is True
    assert result.transaction.amount == 50
    assert result.transaction.cause == "compra"
    assert ledger.get_balance(1) == 50


def test_same_reference_is_recorded_once(db, ledger, make_profile):
    make_profile(1)

    first = ledger.record_transaction(1, 50, PointsCause.PURCHASE, reference_id="order:1")
    second = ledger.record_transaction(1, 50, PointsCause.PURCHASE, reference_id="order:1")

    assert second.created is False
    assert second.transaction.id == first.transaction.id
    assert len(_rows(db, 1)) == 1
    assert ledger.get_balance(1) == 50


def test_same_reference_with_other_cause_is_separate(db, ledger, make_profile):
    make_profile(1)

    ledger.record_transaction(1, 50, PointsCause.PURCHASE, reference_id="x-1")
    result = ledger.record_transaction(1, 10, PointsCause.SERVICE, reference_id="x-1")

    assert result.created is True
    assert len(_rows(db, 1)) == 2


def test_rows_without_reference_are_never_deduplicated(db, ledger, make_profile):
    make_profile(1)

    ledger.record_transaction(1, 5, "loja-fisica")
    ledger.record_transaction(1, 5, "loja-fisica")

    assert len(_rows(db, 1)) == 2
    assert ledger.get_balance(1) == 10


def test_redemption_checks_ledger_not_cached_balance(db, ledger, make_profile):
    make_profile(1, balance=1000)
    ledger.record_transaction(1, 40, PointsCause.PURCHASE, reference_id="order:1")

    with pytest.raises(InsufficientPoints) as exc:
        ledger.redeem(1, 100)

    assert exc.value.balance == 40
    assert len(_rows(db, 1)) == 1


def test_redemption_within_balance(db, ledger, make_profile):
    make_profile(1)
    ledger.record_transaction(1, 40, PointsCause.PURCHASE, reference_id="order:1")

    result = ledger.redeem(1, 30, reference_id="reward:7")

    assert result.transaction.amount == -30
    assert result.transaction.cause == "resgate"
    assert ledger.get_balance(1) == 10


def test_manual_adjustment_describes_reason(ledger, make_profile):
    make_profile(1)

    result = ledger.adjust(1, 15, "reklamacja")

    assert result.transaction.cause == "ajuste-manual"
    assert "reklamacja" in result.transaction.description


def test_zero_amount_is_rejected(ledger, make_profile):
    make_profile(1)

    with pytest.raises(InvalidQuantity):
        ledger.record_transaction(1, 0, PointsCause.SERVICE)


def test_unknown_profile_is_not_found(ledger):
    with pytest.raises(NotFound):
        ledger.record_transaction(99, 10, PointsCause.SERVICE)


def test_unknown_cause_is_rejected(ledger, make_profile):
    make_profile(1)

    with pytest.raises(ValueError):
        ledger.record_transaction(1, 10, "bonus")


def test_cache_failure_keeps_row_and_leaves_drift(db, ledger, auditor, make_profile, monkeypatch):
    make_profile(1)

    def broken(user_id, amount):
        raise StoreUnavailable()

    monkeypatch.setattr(ledger.profiles, "increment_balance", broken)
    result = ledger.record_transaction(1, 25, PointsCause.PURCHASE, reference_id="order:5")

    assert result.created is True
    assert ProfileRepo(db).read_balance(1) == 0

    audit = auditor.audit_user_points(1)
    assert audit.transaction_balance == 25
    assert audit.difference == -25
    assert audit.status == "discrepancy"


def test_transactions_page_newest_first(ledger, make_profile):
    make_profile(1)
    for n in range(5):
        ledger.record_transaction(1, n + 1, PointsCause.SERVICE, reference_id=f"s:{n}")

    items, total = ledger.list_transactions(1, page=1, page_size=2)

    assert total == 5
    assert [tx.amount for tx in items] == [5, 4]


def test_ledger_writes_take_user_lock(ledger, locks, make_profile):
    make_profile(1)

    ledger.record_transaction(1, 5, PointsCause.SERVICE)

    assert locks.acquired == [1]

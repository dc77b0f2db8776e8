# app/domain/points.py
"""
Czysta arytmetyka ksiegi punktow, wspolna dla ksiegi i audytora.

Saldo transakcji liczone jest od zera z wierszy, bez cache z profilu:
- wiersz powtarzajacy wczesniejsza pare (cause, reference_id) to duplikat,
  liczony osobno i pomijany w saldzie
- wiersze ajuste-automatico koryguja tylko cache profilu, nie punkty
"""
from typing import Iterable, Sequence

from app.domain.enums import PointsCause
from app.domain.schemas import TransactionSummary


def _ordered(transactions: Iterable) -> list:
    return sorted(transactions, key=lambda t: (t.created_at, t.id))


def split_duplicates(transactions: Iterable) -> tuple[list, list]:
    """Zwraca (wiersze liczone, duplikaty) w kolejnosci zapisu."""
    seen: set[tuple[str, str]] = set()
    counted, duplicates = [], []

    for tx in _ordered(transactions):
        if tx.reference_id is None:
            counted.append(tx)
            continue

        key = (tx.cause, tx.reference_id)
        if key in seen:
            duplicates.append(tx)
        else:
            seen.add(key)
            counted.append(tx)

    return counted, duplicates


def balance_rows(transactions: Sequence) -> list:
    """Wiersze skladajace sie na saldo: bez duplikatow i bez ajuste-automatico."""
    counted, _ = split_duplicates(transactions)
    return [tx for tx in counted if tx.cause != PointsCause.AUTO_ADJUSTMENT.value]


def transaction_balance(transactions: Sequence) -> int:
    return sum(tx.amount for tx in balance_rows(transactions))


def duplicate_count(transactions: Sequence) -> int:
    _, duplicates = split_duplicates(transactions)
    return len(duplicates)


def summarize_transactions(transactions: Sequence) -> TransactionSummary:
    earned = sum(tx.amount for tx in transactions if tx.amount > 0)
    redeemed = abs(sum(tx.amount for tx in transactions if tx.amount < 0))
    return TransactionSummary(
        total_earned=earned,
        total_redeemed=redeemed,
        net_balance=sum(tx.amount for tx in transactions),
    )

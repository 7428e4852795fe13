"""Monthly bucketing of ledger activity into cash and invested series"""

from datetime import date
from typing import Dict, Iterable, List
from wealth_gateway.domain.models import (
    CashBucket,
    InvestmentLedgerEntry,
    LedgerEntry,
    MonthKey,
    TransactionKind,
)
from wealth_gateway.utils.date_utils import month_range


def signed_amount(entry: LedgerEntry) -> int:
    """Cash effect of a ledger entry: income credits, expense and investment debit, transfer is neutral"""
    if entry.kind is TransactionKind.INCOME:
        return entry.amount_cents
    if entry.kind in (TransactionKind.EXPENSE, TransactionKind.INVESTMENT):
        return -entry.amount_cents
    if entry.kind is TransactionKind.TRANSFER:
        return 0
    raise ValueError(f"Unhandled transaction kind: {entry.kind!r}")


def build_buckets(event_dates: Iterable[date], today: date) -> List[MonthKey]:
    """
    Contiguous months from the earliest event through today's month.

    With no events the range is just today's month. Months without activity
    are still present.
    """
    dates = list(event_dates)
    start = MonthKey.of(min(dates)) if dates else MonthKey.of(today)
    end = MonthKey.of(today)
    # Events dated after today still anchor at most from today's month
    return month_range(min(start, end), end)


def _fold(deltas: Dict[MonthKey, int], buckets: List[MonthKey]) -> List[CashBucket]:
    running = 0
    series = []
    for month in buckets:
        delta = deltas[month]
        running += delta
        series.append(CashBucket(month=month, delta_cents=delta, cumulative_cents=running))
    return series


def aggregate_cash(entries: Iterable[LedgerEntry], buckets: List[MonthKey]) -> List[CashBucket]:
    """
    Net signed cash delta and running total per bucket.

    Entries falling outside the bucket range are ignored.
    """
    deltas: Dict[MonthKey, int] = {month: 0 for month in buckets}
    for entry in entries:
        key = MonthKey.of(entry.occurred_on)
        if key not in deltas:
            continue
        deltas[key] += signed_amount(entry)
    return _fold(deltas, buckets)


def aggregate_invested(
    entries: Iterable[InvestmentLedgerEntry], buckets: List[MonthKey]
) -> List[CashBucket]:
    """Realized contributions per bucket and their running total"""
    deltas: Dict[MonthKey, int] = {month: 0 for month in buckets}
    for entry in entries:
        if entry.bucket not in deltas:
            continue
        deltas[entry.bucket] += entry.amount_cents
    return _fold(deltas, buckets)

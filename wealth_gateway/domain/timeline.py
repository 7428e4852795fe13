"""Net worth timeline - merges the cash series with investment projections"""

from datetime import date
from typing import Iterable, List
from wealth_gateway.domain.buckets import aggregate_cash, aggregate_invested, build_buckets
from wealth_gateway.domain.growth import project_plan
from wealth_gateway.domain.models import (
    GrowthRange,
    InvestmentLedgerEntry,
    InvestmentPlan,
    LedgerEntry,
    TimelinePoint,
)


def build_timeline(
    entries: Iterable[LedgerEntry],
    plans: Iterable[InvestmentPlan],
    today: date,
    investment_entries: Iterable[InvestmentLedgerEntry] = (),
) -> List[TimelinePoint]:
    """
    Monthly net worth range from the earliest ledger entry through today's month.

    The cash buckets fix the month sequence; investment projections are
    evaluated for those months only, so every series lines up key for key.
    Plans are summed independently and only active plans count.

    Returns:
        One TimelinePoint per month, oldest first
    """
    entries = list(entries)
    active_plans = [plan for plan in plans if plan.is_active]

    buckets = build_buckets((entry.occurred_on for entry in entries), today)
    cash_series = aggregate_cash(entries, buckets)
    invested_series = aggregate_invested(investment_entries, buckets)

    timeline = []
    for cash, invested in zip(cash_series, invested_series):
        growth = GrowthRange()
        for plan in active_plans:
            growth = growth + project_plan(plan, cash.month)

        investments_min = round(growth.min)
        investments_max = round(growth.max)
        timeline.append(
            TimelinePoint(
                month=cash.month,
                cash_cents=cash.cumulative_cents,
                investments_min_cents=investments_min,
                investments_max_cents=investments_max,
                net_worth_min_cents=cash.cumulative_cents + investments_min,
                net_worth_max_cents=cash.cumulative_cents + investments_max,
                invested_actual_cents=invested.cumulative_cents,
            )
        )

    return timeline


def summarize(timeline: List[TimelinePoint]) -> TimelinePoint:
    """
    Latest point of a timeline, i.e. the current month's balance and net worth range.

    build_timeline always yields at least today's month.
    """
    return timeline[-1]

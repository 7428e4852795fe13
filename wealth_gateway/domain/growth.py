"""Future value projection for periodic contribution streams"""

from wealth_gateway.domain.models import GrowthRange, InvestmentPlan, MonthKey
from wealth_gateway.utils.date_utils import elapsed_months


def monthly_rate(annual_return_pct: float) -> float:
    """Monthly-equivalent rate as a fraction: 12% a year -> 0.01"""
    return annual_return_pct / 12 / 100


def future_value(contribution: float, rate: float, periods: int) -> float:
    """
    Future value of a contribution paid at the start of each period.

    Annuity due: FV = P * ((1 + r)^n - 1) / r * (1 + r), so every
    contribution earns the return of the period it is paid in. A zero or
    negative rate degrades to P * n. Never negative.

    Example:
        P=1000000 cents, r=0.01, n=12 -> 12809328 cents (about 128,093.28)
    """
    if periods <= 0:
        return 0.0
    if rate > 0:
        value = contribution * (((1 + rate) ** periods - 1) / rate) * (1 + rate)
    else:
        value = contribution * periods
    return max(value, 0.0)


def project_plan(plan: InvestmentPlan, bucket: MonthKey) -> GrowthRange:
    """
    Projected value a plan has built up by the given month, under both return scenarios.

    Both bounds run through the same formula; only the rate differs.
    """
    periods = elapsed_months(plan.start_date, bucket.first_day)
    if periods == 0:
        return GrowthRange()
    return GrowthRange(
        min=future_value(plan.contribution_cents, monthly_rate(plan.return_min_pct), periods),
        max=future_value(plan.contribution_cents, monthly_rate(plan.return_max_pct), periods),
    )

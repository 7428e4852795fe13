"""Goal planning - required monthly contribution to reach a dated target"""

import math
from datetime import date
from wealth_gateway.config import settings
from wealth_gateway.domain.exceptions import InvalidGoalError
from wealth_gateway.domain.growth import future_value, monthly_rate
from wealth_gateway.domain.models import (
    CompoundingFrequency,
    ContributionQuote,
    Goal,
    GoalProgress,
    GoalStatus,
)
from wealth_gateway.utils.date_utils import elapsed_months


def validate_target_date(target_date: date, today: date) -> None:
    """Raise InvalidGoalError unless the target date lies after today"""
    if target_date <= today:
        raise InvalidGoalError(f"Target date {target_date.isoformat()} must be after {today.isoformat()}")


def required_contribution(
    target_cents: int,
    target_date: date,
    annual_return_pct: float,
    compounding: CompoundingFrequency,
    today: date,
) -> ContributionQuote:
    """
    Smallest constant monthly contribution that reaches the target.

    Inverts future_value() over the months between today and the target date
    at the monthly-equivalent rate r = annual / 12:

        P = A * r / (((1 + r)^n - 1) * (1 + r))    for r > 0
        P = A / n                                   otherwise

    Contributions are monthly whatever the goal's stated compounding, so the
    quote is directly comparable with an investment plan's contribution.
    P is rounded up to a whole cent so the projected value never falls short.
    When the target date is not after today, or the horizon holds no full
    month, the quote carries no contribution and a reason instead.
    """
    rate = monthly_rate(annual_return_pct)
    quote = ContributionQuote(
        target_cents=target_cents,
        target_date=target_date,
        compounding=compounding,
        periods=0,
        period_rate=rate,
    )

    if target_date <= today:
        quote.reason = "target date is not in the future"
        return quote

    periods = elapsed_months(today, target_date)
    quote.periods = periods
    if periods == 0:
        quote.reason = "no full month before the target date"
        return quote

    if rate > 0:
        exact = target_cents * rate / (((1 + rate) ** periods - 1) * (1 + rate))
    else:
        exact = target_cents / periods

    contribution = math.ceil(exact)
    # Guard against float noise leaving the rounded-up value a hair short
    if future_value(contribution, rate, periods) < target_cents - 1e-6:
        contribution += 1
    quote.contribution_cents = contribution
    return quote


def quote_for_goal(goal: Goal, today: date) -> ContributionQuote:
    return required_contribution(
        goal.target_cents, goal.target_date, goal.annual_return_pct, goal.compounding, today
    )


def project_goal_value(invested_cents: int, contribution_cents: int, rate: float, periods: int) -> float:
    """Invested balance compounded over the horizon plus the contribution stream paid into it"""
    if periods <= 0:
        return float(invested_cents)
    grown = invested_cents * (1 + rate) ** periods if rate > 0 else float(invested_cents)
    return max(grown, 0.0) + future_value(contribution_cents, rate, periods)


def assess_goal(quote: ContributionQuote, current_contribution_cents: int, invested_cents: int) -> GoalProgress:
    """
    Project current investments and the current monthly contribution to the
    target date and classify progress.

    - completed: projected value reaches the target (progress >= 100%)
    - on_track:  current contribution is at least goal_on_track_ratio of the required one
    - behind:    anything else, including goals with no feasible schedule left
    """
    projected = round(
        project_goal_value(invested_cents, current_contribution_cents, quote.period_rate, quote.periods)
    )
    progress_percent = round(projected / quote.target_cents * 100, 2)

    if progress_percent >= 100:
        status = GoalStatus.COMPLETED
    elif quote.feasible and current_contribution_cents >= quote.contribution_cents * settings.goal_on_track_ratio:
        status = GoalStatus.ON_TRACK
    else:
        status = GoalStatus.BEHIND

    return GoalProgress(
        current_value_cents=invested_cents,
        projected_value_cents=projected,
        progress_percent=progress_percent,
        status=status,
    )

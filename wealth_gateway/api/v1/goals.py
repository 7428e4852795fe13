"""Required contribution quotes for savings goals"""

import uuid
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from wealth_gateway.api.v1.schemas import ContributionQuoteRequest, ContributionQuoteResponse
from wealth_gateway.api.dependencies import get_current_user_id, get_today
from wealth_gateway.infrastructure.database.session import get_db
from wealth_gateway.infrastructure.database.repositories import GoalRepository, InvestmentPlanRepository
from wealth_gateway.domain.exceptions import InvalidGoalError
from wealth_gateway.domain.goals import (
    assess_goal,
    quote_for_goal,
    required_contribution,
    validate_target_date,
)
from wealth_gateway.domain.models import ContributionQuote, GoalProgress
from wealth_gateway.infrastructure.observability.metrics import record_goal_quote

router = APIRouter()


def _quote_response(
    quote: ContributionQuote,
    goal_id: Optional[str] = None,
    progress: Optional[GoalProgress] = None,
) -> ContributionQuoteResponse:
    record_goal_quote(quote.feasible)
    progress_fields = {}
    if progress is not None:
        progress_fields = dict(
            status=progress.status,
            current_value_cents=progress.current_value_cents,
            projected_value_cents=progress.projected_value_cents,
            progress_percent=progress.progress_percent,
        )
    return ContributionQuoteResponse(
        goal_id=goal_id,
        target_cents=quote.target_cents,
        target_date=quote.target_date,
        compounding=quote.compounding,
        periods=quote.periods,
        period_rate=quote.period_rate,
        feasible=quote.feasible,
        contribution_cents=quote.contribution_cents,
        reason=quote.reason,
        **progress_fields,
    )


@router.post("/goals/required-contribution", response_model=ContributionQuoteResponse)
def quote_required_contribution(
    request_body: ContributionQuoteRequest,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
):
    """
    Monthly contribution needed to reach a target by a date.

    Returns:
        Quote with contributionCents, or feasible=false and a reason when the
        horizon holds no full month
    """
    try:
        validate_target_date(request_body.target_date, today)
    except InvalidGoalError as e:
        raise HTTPException(status_code=422, detail=str(e))

    quote = required_contribution(
        target_cents=request_body.target_cents,
        target_date=request_body.target_date,
        annual_return_pct=request_body.annual_return_pct,
        compounding=request_body.compounding,
        today=today,
    )
    return _quote_response(quote)


@router.get("/goals/{goal_id}/required-contribution", response_model=ContributionQuoteResponse)
def quote_goal(
    goal_id: str,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Quote for a stored goal, with progress status from the plans linked to it.

    Realized contributions and the monthly contribution of linked active
    plans are projected to the target date. Status is completed when that
    projection reaches the target, on_track when the plans contribute close
    to the required amount, behind otherwise.
    """
    try:
        goal_uuid = uuid.UUID(goal_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid goal ID format")

    goal = GoalRepository(db).get_for_user(goal_uuid, user_id)
    if not goal:
        raise HTTPException(status_code=404, detail="Goal not found")

    plan_repo = InvestmentPlanRepository(db)
    current_contribution = sum(
        plan.contribution_cents for plan in plan_repo.list_active(user_id) if plan.goal_id == goal.id
    )
    invested = sum(entry.amount_cents for entry in plan_repo.list_contributions(user_id, goal_id=goal.id))

    quote = quote_for_goal(goal, today)
    progress = assess_goal(quote, current_contribution, invested)
    return _quote_response(quote, goal_id=goal.id, progress=progress)

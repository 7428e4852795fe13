"""GET /v1/net-worth/timeline and /v1/net-worth/summary - net worth over time"""

import time
from datetime import date
from typing import List, Tuple
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from wealth_gateway.api.v1.schemas import NetWorthSummaryResponse, TimelinePointSchema
from wealth_gateway.api.dependencies import get_current_user_id, get_request_id, get_today
from wealth_gateway.infrastructure.database.session import get_db
from wealth_gateway.infrastructure.database.repositories import InvestmentPlanRepository, LedgerRepository
from wealth_gateway.domain.models import TimelinePoint
from wealth_gateway.domain.timeline import build_timeline, summarize
from wealth_gateway.infrastructure.observability.metrics import timeline_buckets_histogram
from wealth_gateway.infrastructure.observability.logging import log_timeline

router = APIRouter()


def _load_timeline(db: Session, user_id: str, today: date) -> Tuple[List[TimelinePoint], int]:
    """Build the user's timeline; also returns how many active plans fed it"""
    plan_repo = InvestmentPlanRepository(db)
    plans = plan_repo.list_active(user_id)
    timeline = build_timeline(
        entries=LedgerRepository(db).list_by_user(user_id),
        plans=plans,
        today=today,
        investment_entries=plan_repo.list_contributions(user_id),
    )
    return timeline, len(plans)


@router.get("/net-worth/timeline", response_model=List[TimelinePointSchema])
def get_net_worth_timeline(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Monthly net worth from the earliest transaction through the current month.

    Returns:
        One point per month with cumulative cash, the min/max projected value
        of active investment plans, and the resulting net worth range (cents)
    """
    start_time = time.time()
    timeline, plan_count = _load_timeline(db, user_id, today)

    timeline_buckets_histogram.observe(len(timeline))
    log_timeline(
        get_request_id(request),
        user_id,
        bucket_count=len(timeline),
        plan_count=plan_count,
        duration_ms=(time.time() - start_time) * 1000,
    )

    return [
        TimelinePointSchema(
            month=str(point.month),
            cash=point.cash_cents,
            investments_min=point.investments_min_cents,
            investments_max=point.investments_max_cents,
            net_worth_min=point.net_worth_min_cents,
            net_worth_max=point.net_worth_max_cents,
            invested_actual=point.invested_actual_cents,
        )
        for point in timeline
    ]


@router.get("/net-worth/summary", response_model=NetWorthSummaryResponse)
def get_net_worth_summary(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Current month's cash balance and net worth range"""
    timeline, _ = _load_timeline(db, user_id, today)
    latest = summarize(timeline)

    return NetWorthSummaryResponse(
        month=str(latest.month),
        cash=latest.cash_cents,
        net_worth_min=latest.net_worth_min_cents,
        net_worth_max=latest.net_worth_max_cents,
    )

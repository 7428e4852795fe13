"""Pydantic schemas for API request/response validation"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from datetime import date
from typing import List, Optional
from wealth_gateway.domain.models import (
    CompoundingFrequency,
    GoalStatus,
    RecurrenceFrequency,
    TransactionKind,
)


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TimelinePointSchema(CamelModel):
    """One month of the net worth timeline; amounts in cents"""

    month: str = Field(..., description="Calendar month, YYYY-MM")
    cash: int
    investments_min: int
    investments_max: int
    net_worth_min: int
    net_worth_max: int
    invested_actual: int = Field(0, description="Realized contributions booked up to this month")


class NetWorthSummaryResponse(CamelModel):
    """Response for GET /v1/net-worth/summary"""

    month: str
    cash: int
    net_worth_min: int
    net_worth_max: int


class LedgerEntrySchema(CamelModel):
    """Ledger entry created by the recurring scheduler"""

    id: Optional[str] = None
    amount_cents: int
    kind: TransactionKind
    category: str
    description: str
    occurred_on: date = Field(..., alias="date")
    recurring_template_id: Optional[str] = None


class ProcessRecurringResponse(CamelModel):
    """Response for POST /v1/recurring/process"""

    created_count: int
    created: List[LedgerEntrySchema]


class TemplatePayloadSchema(CamelModel):
    """Transaction a recurring template produces, validated when the template is created"""

    amount_cents: int = Field(..., gt=0, strict=True, description="Amount in whole cents")
    category: str = Field(..., min_length=1, pattern=r"\S")
    kind: TransactionKind
    description: str = ""


class CreateTemplateRequest(CamelModel):
    """Request body for POST /v1/recurring/templates"""

    payload: TemplatePayloadSchema
    frequency: RecurrenceFrequency
    next_due_date: date


class TemplateResponse(CamelModel):
    id: str
    payload: TemplatePayloadSchema
    frequency: RecurrenceFrequency
    next_due_date: date
    is_active: bool


class ContributionQuoteRequest(CamelModel):
    """Request body for POST /v1/goals/required-contribution"""

    target_cents: int = Field(..., gt=0, description="Target amount in cents")
    target_date: date
    annual_return_pct: float = Field(12.0, ge=-100, le=100)
    compounding: CompoundingFrequency = CompoundingFrequency.MONTHLY


class ContributionQuoteResponse(CamelModel):
    """Required monthly contribution; contribution is null when no schedule exists"""

    goal_id: Optional[str] = None
    target_cents: int
    target_date: date
    compounding: CompoundingFrequency
    periods: int = Field(..., description="Monthly contributions left before the target date")
    period_rate: float = Field(..., description="Monthly-equivalent return rate as a fraction")
    feasible: bool
    contribution_cents: Optional[int] = None
    reason: Optional[str] = None
    status: Optional[GoalStatus] = None
    current_value_cents: Optional[int] = Field(None, description="Realized contributions to the goal's plans")
    projected_value_cents: Optional[int] = Field(
        None, description="Current investments plus current contributions, projected to the target date"
    )
    progress_percent: Optional[float] = None


class SalaryRequest(CamelModel):
    """Request body for POST /v1/salary"""

    amount_cents: int = Field(..., gt=0, strict=True, description="Monthly salary in whole cents")
    effective_date: date = Field(..., description="First payday; its day of month is the monthly payday")


class SalaryResponse(CamelModel):
    id: str
    amount_cents: int
    effective_date: date

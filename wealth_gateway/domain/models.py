"""Domain models - pure Python dataclasses representing business entities"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Tuple
from wealth_gateway.domain.exceptions import InvalidPlanError


class TransactionKind(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"
    INVESTMENT = "investment"
    TRANSFER = "transfer"


class PlanStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    ARCHIVED = "archived"


class GoalStatus(str, Enum):
    ON_TRACK = "on_track"
    BEHIND = "behind"
    COMPLETED = "completed"


class CompoundingFrequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class RecurrenceFrequency(str, Enum):
    ONCE = "once"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True, order=True)
class MonthKey:
    """Calendar month bucket, the join key for every monthly series"""

    year: int
    month: int

    @classmethod
    def of(cls, day: date) -> "MonthKey":
        return cls(day.year, day.month)

    @classmethod
    def parse(cls, value: str) -> "MonthKey":
        year, month = value.split("-")
        return cls(int(year), int(month))

    def next(self) -> "MonthKey":
        if self.month == 12:
            return MonthKey(self.year + 1, 1)
        return MonthKey(self.year, self.month + 1)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"


@dataclass
class LedgerEntry:
    """Dated cash transaction owned by one user"""

    amount_cents: int
    kind: TransactionKind
    occurred_on: date
    category: str = ""
    description: str = ""
    recurring_template_id: Optional[str] = None
    id: Optional[str] = None


@dataclass
class InvestmentPlan:
    """Periodic contribution stream with a min/max expected annual return"""

    contribution_cents: int
    return_min_pct: float
    return_max_pct: float
    compounding: CompoundingFrequency
    start_date: date
    status: PlanStatus = PlanStatus.ACTIVE
    end_date: Optional[date] = None
    goal_id: Optional[str] = None
    id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.contribution_cents < 0:
            raise InvalidPlanError("Contribution must not be negative")
        if self.return_min_pct > self.return_max_pct:
            raise InvalidPlanError(
                f"Minimum return {self.return_min_pct}% exceeds maximum return {self.return_max_pct}%"
            )

    @property
    def is_active(self) -> bool:
        return self.status is PlanStatus.ACTIVE


@dataclass
class InvestmentLedgerEntry:
    """Realized contribution to a plan, booked against a month"""

    plan_id: str
    amount_cents: int
    year: int
    month: int

    @property
    def bucket(self) -> MonthKey:
        return MonthKey(self.year, self.month)


@dataclass
class TemplatePayload:
    """Decoded description of the transaction a recurring template produces"""

    amount_cents: int
    category: str
    kind: TransactionKind
    description: str = ""


@dataclass
class RecurringTemplate:
    """Stored rule for recreating a transaction on a schedule"""

    id: str
    user_id: str
    payload: str  # JSON text, decoded at processing time
    frequency: RecurrenceFrequency
    next_due_date: date
    is_active: bool = True
    version: int = 0

    def is_due(self, today: date) -> bool:
        return self.is_active and self.next_due_date <= today


@dataclass
class Goal:
    """Dated monetary target"""

    target_cents: int
    target_date: date
    annual_return_pct: float
    compounding: CompoundingFrequency = CompoundingFrequency.MONTHLY
    name: str = ""
    id: Optional[str] = None


@dataclass(frozen=True)
class GrowthRange:
    """Projected value under the minimum and maximum return scenario"""

    min: float = 0.0
    max: float = 0.0

    def __add__(self, other: "GrowthRange") -> "GrowthRange":
        return GrowthRange(self.min + other.min, self.max + other.max)


@dataclass
class CashBucket:
    month: MonthKey
    delta_cents: int
    cumulative_cents: int


@dataclass
class TimelinePoint:
    """Net worth for one month"""

    month: MonthKey
    cash_cents: int
    investments_min_cents: int
    investments_max_cents: int
    net_worth_min_cents: int
    net_worth_max_cents: int
    invested_actual_cents: int = 0


@dataclass
class ContributionQuote:
    """Required monthly contribution for a goal; contribution is None when no schedule exists"""

    target_cents: int
    target_date: date
    compounding: CompoundingFrequency
    periods: int
    period_rate: float
    contribution_cents: Optional[int] = None
    reason: Optional[str] = None

    @property
    def feasible(self) -> bool:
        return self.contribution_cents is not None


@dataclass
class GoalProgress:
    """Where current investments and contributions land by a goal's target date"""

    current_value_cents: int
    projected_value_cents: int
    progress_percent: float
    status: GoalStatus


@dataclass
class Occurrence:
    """Outcome of processing one due template: the entry plus the template's new schedule"""

    entry: LedgerEntry
    next_due_date: date
    is_active: bool


@dataclass
class SchedulerResult:
    created: List[LedgerEntry] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)  # (template_id, reason)

    @property
    def created_count(self) -> int:
        return len(self.created)


@dataclass
class Salary:
    """Monthly salary; effective_date fixes the day of month it is paid on"""

    user_id: str
    amount_cents: int
    effective_date: date
    id: Optional[str] = None


@dataclass
class SalaryCreditResult:
    credited: List[LedgerEntry] = field(default_factory=list)
    skipped: List[Tuple[str, str]] = field(default_factory=list)  # (user_id, reason)

    @property
    def credited_count(self) -> int:
        return len(self.credited)

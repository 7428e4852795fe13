"""Data access layer for ledger, plan, goal, recurring template and salary entities"""

import logging
import uuid
from datetime import date
from typing import List, Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from wealth_gateway.infrastructure.database.models import (
    GoalRecord,
    InvestmentLedgerRecord,
    InvestmentPlanRecord,
    LedgerEntryRecord,
    RecurringTemplateRecord,
    SalaryCreditRecord,
    SalaryRecord,
)
from wealth_gateway.domain.exceptions import InvalidPlanError, SalaryAlreadyCreditedError, TemplateConflictError
from wealth_gateway.domain.models import (
    CompoundingFrequency,
    Goal,
    InvestmentLedgerEntry,
    InvestmentPlan,
    LedgerEntry,
    MonthKey,
    Occurrence,
    PlanStatus,
    RecurrenceFrequency,
    RecurringTemplate,
    Salary,
    TransactionKind,
)
from wealth_gateway.utils.date_utils import month_end


def _to_uuid(value: str) -> uuid.UUID:
    return value if isinstance(value, uuid.UUID) else uuid.UUID(str(value))


def _ledger_entry(record: LedgerEntryRecord) -> LedgerEntry:
    return LedgerEntry(
        id=str(record.id),
        amount_cents=record.amount_cents,
        kind=TransactionKind(record.kind),
        occurred_on=record.occurred_on,
        category=record.category,
        description=record.description,
        recurring_template_id=str(record.recurring_template_id) if record.recurring_template_id else None,
    )


def _template(record: RecurringTemplateRecord) -> RecurringTemplate:
    return RecurringTemplate(
        id=str(record.id),
        user_id=record.user_id,
        payload=record.transaction_data,
        frequency=RecurrenceFrequency(record.frequency),
        next_due_date=record.next_due_date,
        is_active=record.is_active,
        version=record.version,
    )


class LedgerRepository:
    """Repository for ledger entries"""

    def __init__(self, db: Session):
        self.db = db

    def list_by_user(self, user_id: str) -> List[LedgerEntry]:
        records = (
            self.db.query(LedgerEntryRecord)
            .filter(LedgerEntryRecord.user_id == user_id)
            .order_by(LedgerEntryRecord.occurred_on)
            .all()
        )
        return [_ledger_entry(r) for r in records]

    def add_entry(self, user_id: str, entry: LedgerEntry) -> LedgerEntry:
        """Persist a ledger entry; returns it with its generated ID"""
        record = LedgerEntryRecord(
            user_id=user_id,
            amount_cents=entry.amount_cents,
            kind=entry.kind.value,
            category=entry.category,
            description=entry.description,
            occurred_on=entry.occurred_on,
            recurring_template_id=(
                _to_uuid(entry.recurring_template_id) if entry.recurring_template_id else None
            ),
        )
        self.db.add(record)
        self.db.flush()  # Get ID without committing
        return _ledger_entry(record)

    def has_income_in_month(self, user_id: str, category: str, month: MonthKey) -> bool:
        """Whether an income entry in the category is booked within the month"""
        found = (
            self.db.query(LedgerEntryRecord.id)
            .filter(
                LedgerEntryRecord.user_id == user_id,
                LedgerEntryRecord.kind == TransactionKind.INCOME.value,
                LedgerEntryRecord.category == category,
                LedgerEntryRecord.occurred_on >= month.first_day,
                LedgerEntryRecord.occurred_on <= month_end(month.first_day),
            )
            .first()
        )
        return found is not None


class InvestmentPlanRepository:
    """Repository for investment plans and their realized contributions"""

    def __init__(self, db: Session):
        self.db = db

    def list_active(self, user_id: str) -> List[InvestmentPlan]:
        records = (
            self.db.query(InvestmentPlanRecord)
            .filter(
                InvestmentPlanRecord.user_id == user_id,
                InvestmentPlanRecord.status == PlanStatus.ACTIVE.value,
            )
            .all()
        )
        plans = []
        for r in records:
            try:
                plans.append(
                    InvestmentPlan(
                        id=str(r.id),
                        contribution_cents=r.contribution_cents,
                        return_min_pct=r.return_min_pct,
                        return_max_pct=r.return_max_pct,
                        compounding=CompoundingFrequency(r.compounding),
                        start_date=r.start_date,
                        end_date=r.end_date,
                        status=PlanStatus(r.status),
                        goal_id=str(r.goal_id) if r.goal_id else None,
                    )
                )
            except InvalidPlanError as e:
                logging.warning(f"Skipping investment plan: {e}", extra={"user_id": user_id, "plan_id": str(r.id)})
        return plans

    def list_contributions(self, user_id: str, goal_id: Optional[str] = None) -> List[InvestmentLedgerEntry]:
        """Realized contributions for a user, optionally limited to plans linked to one goal"""
        query = self.db.query(InvestmentLedgerRecord).filter(InvestmentLedgerRecord.user_id == user_id)
        if goal_id is not None:
            query = query.join(InvestmentPlanRecord).filter(InvestmentPlanRecord.goal_id == _to_uuid(goal_id))
        return [
            InvestmentLedgerEntry(
                plan_id=str(r.plan_id),
                amount_cents=r.amount_cents,
                year=r.year,
                month=r.month,
            )
            for r in query.order_by(InvestmentLedgerRecord.year, InvestmentLedgerRecord.month).all()
        ]


class GoalRepository:
    """Repository for goals"""

    def __init__(self, db: Session):
        self.db = db

    def get_for_user(self, goal_id: uuid.UUID, user_id: str) -> Optional[Goal]:
        """Fetch a goal only if it belongs to the user"""
        record = (
            self.db.query(GoalRecord)
            .filter(GoalRecord.id == goal_id, GoalRecord.user_id == user_id)
            .first()
        )
        if record is None:
            return None
        return Goal(
            id=str(record.id),
            name=record.name,
            target_cents=record.target_cents,
            target_date=record.target_date,
            annual_return_pct=record.annual_return_pct,
            compounding=CompoundingFrequency(record.compounding),
        )


class RecurringTemplateRepository:
    """Repository for recurring templates"""

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        user_id: str,
        transaction_data: str,
        frequency: RecurrenceFrequency,
        next_due_date: date,
    ) -> RecurringTemplate:
        record = RecurringTemplateRecord(
            user_id=user_id,
            transaction_data=transaction_data,
            frequency=frequency.value,
            next_due_date=next_due_date,
            is_active=True,
            version=0,
        )
        self.db.add(record)
        self.db.flush()
        return _template(record)

    def get(self, template_id: str) -> Optional[RecurringTemplate]:
        record = self.db.get(RecurringTemplateRecord, _to_uuid(template_id))
        return _template(record) if record else None

    def list_due(
        self,
        user_id: str,
        today: date,
        after_id: Optional[str] = None,
        limit: int = 100,
    ) -> List[RecurringTemplate]:
        """Active templates due on or before today, ordered by ID for keyset paging"""
        query = self.db.query(RecurringTemplateRecord).filter(
            RecurringTemplateRecord.user_id == user_id,
            RecurringTemplateRecord.is_active.is_(True),
            RecurringTemplateRecord.next_due_date <= today,
        )
        if after_id is not None:
            query = query.filter(RecurringTemplateRecord.id > _to_uuid(after_id))
        records = query.order_by(RecurringTemplateRecord.id).limit(limit).all()
        return [_template(r) for r in records]

    def users_with_due(self, today: date) -> List[str]:
        rows = (
            self.db.query(RecurringTemplateRecord.user_id)
            .filter(
                RecurringTemplateRecord.is_active.is_(True),
                RecurringTemplateRecord.next_due_date <= today,
            )
            .distinct()
            .all()
        )
        return sorted(row[0] for row in rows)

    def claim(self, template: RecurringTemplate, occurrence: Occurrence) -> None:
        """
        Advance a template only if it is still in the state we read.

        The conditional update matches on version and due date, so two runs
        that both saw the same due occurrence cannot both claim it.

        Raises:
            TemplateConflictError: When another run already moved the template on
        """
        updated = (
            self.db.query(RecurringTemplateRecord)
            .filter(
                RecurringTemplateRecord.id == _to_uuid(template.id),
                RecurringTemplateRecord.version == template.version,
                RecurringTemplateRecord.next_due_date == template.next_due_date,
                RecurringTemplateRecord.is_active.is_(True),
            )
            .update(
                {
                    RecurringTemplateRecord.next_due_date: occurrence.next_due_date,
                    RecurringTemplateRecord.is_active: occurrence.is_active,
                    RecurringTemplateRecord.version: template.version + 1,
                },
                synchronize_session=False,
            )
        )
        if updated != 1:
            raise TemplateConflictError(f"Template {template.id} changed since it was read")


def _salary(record: SalaryRecord) -> Salary:
    return Salary(
        id=str(record.id),
        user_id=record.user_id,
        amount_cents=record.amount_cents,
        effective_date=record.effective_date,
    )


class SalaryRepository:
    """Repository for salaries and the months they were auto-credited"""

    def __init__(self, db: Session):
        self.db = db

    def upsert(self, user_id: str, amount_cents: int, effective_date: date) -> Salary:
        """Set the salary effective on a date, replacing any amount already recorded for that date"""
        record = (
            self.db.query(SalaryRecord)
            .filter(SalaryRecord.user_id == user_id, SalaryRecord.effective_date == effective_date)
            .first()
        )
        if record is None:
            record = SalaryRecord(user_id=user_id, effective_date=effective_date)
            self.db.add(record)
        record.amount_cents = amount_cents
        self.db.flush()
        return _salary(record)

    def current_for_user(self, user_id: str, today: date) -> Optional[Salary]:
        """Salary with the latest effective date on or before today"""
        record = (
            self.db.query(SalaryRecord)
            .filter(SalaryRecord.user_id == user_id, SalaryRecord.effective_date <= today)
            .order_by(SalaryRecord.effective_date.desc())
            .first()
        )
        return _salary(record) if record else None

    def latest_effective(self, today: date) -> List[Salary]:
        """Current salary of every user who has one"""
        records = (
            self.db.query(SalaryRecord)
            .filter(SalaryRecord.effective_date <= today)
            .order_by(SalaryRecord.user_id, SalaryRecord.effective_date.desc())
            .all()
        )
        latest = {}
        for record in records:
            latest.setdefault(record.user_id, record)
        return [_salary(r) for r in latest.values()]

    def claim_month(self, user_id: str, month: MonthKey, ledger_entry_id: Optional[str]) -> None:
        """
        Record that the month's salary is credited.

        Raises:
            SalaryAlreadyCreditedError: When the month was claimed already
        """
        self.db.add(
            SalaryCreditRecord(
                user_id=user_id,
                year=month.year,
                month=month.month,
                ledger_entry_id=_to_uuid(ledger_entry_id) if ledger_entry_id else None,
            )
        )
        try:
            self.db.flush()
        except IntegrityError as e:
            raise SalaryAlreadyCreditedError(f"Salary for {month} already credited for {user_id}") from e

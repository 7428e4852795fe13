"""SQLAlchemy ORM models for ledger, plans, goals, recurring templates and salaries"""

import uuid
from sqlalchemy import Column, BigInteger, Boolean, Float, DateTime, Date, Integer, ForeignKey, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import declarative_base, relationship
from sqlalchemy.sql import func

Base = declarative_base()


class LedgerEntryRecord(Base):
    """Dated cash transaction"""

    __tablename__ = "ledger_entry"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    kind = Column(Text, nullable=False)  # income | expense | investment | transfer
    category = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    occurred_on = Column(Date, nullable=False)
    recurring_template_id = Column(
        Uuid(as_uuid=True), ForeignKey("recurring_template.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class GoalRecord(Base):
    """Dated savings target"""

    __tablename__ = "goal"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    name = Column(Text, nullable=False, default="")
    target_cents = Column(BigInteger, nullable=False)
    target_date = Column(Date, nullable=False)
    annual_return_pct = Column(Float, nullable=False, default=12.0)
    compounding = Column(Text, nullable=False, default="monthly")
    status = Column(Text, nullable=False, default="on_track")
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    plans = relationship("InvestmentPlanRecord", back_populates="goal")


class InvestmentPlanRecord(Base):
    """Periodic investment plan with a min/max expected return"""

    __tablename__ = "investment_plan"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    goal_id = Column(Uuid(as_uuid=True), ForeignKey("goal.id", ondelete="SET NULL"), nullable=True)
    name = Column(Text, nullable=False, default="")
    contribution_cents = Column(BigInteger, nullable=False)
    return_min_pct = Column(Float, nullable=False)
    return_max_pct = Column(Float, nullable=False)
    compounding = Column(Text, nullable=False, default="monthly")
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    status = Column(Text, nullable=False, default="active")  # active | paused | archived
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    goal = relationship("GoalRecord", back_populates="plans")
    contributions = relationship(
        "InvestmentLedgerRecord", back_populates="plan", cascade="all, delete-orphan"
    )


class InvestmentLedgerRecord(Base):
    """Realized contribution to an investment plan"""

    __tablename__ = "investment_ledger_entry"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    plan_id = Column(Uuid(as_uuid=True), ForeignKey("investment_plan.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Text, nullable=False, index=True)
    ledger_entry_id = Column(
        Uuid(as_uuid=True), ForeignKey("ledger_entry.id", ondelete="SET NULL"), nullable=True
    )
    amount_cents = Column(BigInteger, nullable=False)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    is_scheduled = Column(Boolean, nullable=False, default=True)  # False for one-off top-ups
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    plan = relationship("InvestmentPlanRecord", back_populates="contributions")


class RecurringTemplateRecord(Base):
    """Rule for recreating a transaction on a schedule; version guards concurrent claims"""

    __tablename__ = "recurring_template"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    transaction_data = Column(Text, nullable=False)
    frequency = Column(Text, nullable=False)  # once | daily | weekly | monthly | yearly
    next_due_date = Column(Date, nullable=False, index=True)
    is_active = Column(Boolean, nullable=False, default=True)
    version = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SalaryRecord(Base):
    """Salary amount effective from a date; one record per user and date"""

    __tablename__ = "salary"
    __table_args__ = (UniqueConstraint("user_id", "effective_date", name="uq_salary_user_date"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False, index=True)
    amount_cents = Column(BigInteger, nullable=False)
    effective_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SalaryCreditRecord(Base):
    """Month a salary was auto-credited; the unique key allows one credit per user and month"""

    __tablename__ = "salary_credit"
    __table_args__ = (UniqueConstraint("user_id", "year", "month", name="uq_salary_credit_month"),)

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Text, nullable=False)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)
    ledger_entry_id = Column(
        Uuid(as_uuid=True), ForeignKey("ledger_entry.id", ondelete="SET NULL"), nullable=True
    )
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

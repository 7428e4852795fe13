"""Pytest fixtures for testing"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")

import json
import pytest
from datetime import date
from typing import Generator, Optional
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from wealth_gateway.api.main import create_app
from wealth_gateway.api.dependencies import get_today
from wealth_gateway.infrastructure.database.models import (
    Base,
    GoalRecord,
    InvestmentLedgerRecord,
    InvestmentPlanRecord,
    LedgerEntryRecord,
    RecurringTemplateRecord,
    SalaryRecord,
)
from wealth_gateway.infrastructure.database.session import get_db


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Pinned clock for every API test
TODAY = date(2025, 6, 15)
USER_ID = "user_alice"


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database and a fixed clock"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict:
    return {"X-User-ID": USER_ID}


@pytest.fixture
def add_entry(db: Session):
    """Insert a ledger entry for the test user"""

    def _add(
        amount_cents: int,
        kind: str,
        occurred_on: date,
        user_id: str = USER_ID,
        category: str = "test",
    ) -> LedgerEntryRecord:
        record = LedgerEntryRecord(
            user_id=user_id,
            amount_cents=amount_cents,
            kind=kind,
            category=category,
            description="",
            occurred_on=occurred_on,
        )
        db.add(record)
        db.commit()
        return record

    return _add


@pytest.fixture
def add_plan(db: Session):
    """Insert an investment plan for the test user"""

    def _add(
        contribution_cents: int,
        return_min_pct: float,
        return_max_pct: float,
        start_date: date,
        status: str = "active",
        goal_id=None,
        user_id: str = USER_ID,
    ) -> InvestmentPlanRecord:
        record = InvestmentPlanRecord(
            user_id=user_id,
            goal_id=goal_id,
            name="plan",
            contribution_cents=contribution_cents,
            return_min_pct=return_min_pct,
            return_max_pct=return_max_pct,
            compounding="monthly",
            start_date=start_date,
            status=status,
        )
        db.add(record)
        db.commit()
        return record

    return _add


@pytest.fixture
def add_contribution(db: Session):
    """Insert a realized contribution against a plan"""

    def _add(plan: InvestmentPlanRecord, amount_cents: int, year: int, month: int) -> InvestmentLedgerRecord:
        record = InvestmentLedgerRecord(
            plan_id=plan.id,
            user_id=plan.user_id,
            amount_cents=amount_cents,
            year=year,
            month=month,
        )
        db.add(record)
        db.commit()
        return record

    return _add


@pytest.fixture
def add_goal(db: Session):
    """Insert a goal for the test user"""

    def _add(
        target_cents: int,
        target_date: date,
        annual_return_pct: float = 12.0,
        compounding: str = "monthly",
        user_id: str = USER_ID,
    ) -> GoalRecord:
        record = GoalRecord(
            user_id=user_id,
            name="goal",
            target_cents=target_cents,
            target_date=target_date,
            annual_return_pct=annual_return_pct,
            compounding=compounding,
        )
        db.add(record)
        db.commit()
        return record

    return _add


@pytest.fixture
def add_template(db: Session):
    """Insert a recurring template; pass raw to store an arbitrary payload string"""

    def _add(
        frequency: str,
        next_due_date: date,
        amount_cents: int = 150000,
        kind: str = "expense",
        raw: Optional[str] = None,
        is_active: bool = True,
        user_id: str = USER_ID,
    ) -> RecurringTemplateRecord:
        payload = raw if raw is not None else json.dumps(
            {"amount_cents": amount_cents, "category": "rent", "kind": kind, "description": "Rent"}
        )
        record = RecurringTemplateRecord(
            user_id=user_id,
            transaction_data=payload,
            frequency=frequency,
            next_due_date=next_due_date,
            is_active=is_active,
            version=0,
        )
        db.add(record)
        db.commit()
        return record

    return _add


@pytest.fixture
def add_salary(db: Session):
    """Insert a salary record for the test user"""

    def _add(amount_cents: int, effective_date: date, user_id: str = USER_ID) -> SalaryRecord:
        record = SalaryRecord(user_id=user_id, amount_cents=amount_cents, effective_date=effective_date)
        db.add(record)
        db.commit()
        return record

    return _add

"""Scheduled job: materialize due recurring templates and credit salaries for every user"""

import argparse
import logging
from datetime import date, datetime, timezone
from typing import List, Optional

from wealth_gateway.config import settings
from wealth_gateway.domain.salary import SalaryCreditor
from wealth_gateway.domain.scheduler import RecurringScheduler
from wealth_gateway.infrastructure.database.repositories import (
    LedgerRepository,
    RecurringTemplateRepository,
    SalaryRepository,
)
from wealth_gateway.infrastructure.database.session import SessionLocal
from wealth_gateway.infrastructure.observability.logging import setup_logging
from wealth_gateway.infrastructure.observability.metrics import record_salary_run, record_scheduler_run


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Process due recurring transactions and salary credits for all users")
    parser.add_argument("--date", type=date.fromisoformat, help="Process as of this date (YYYY-MM-DD), default today UTC")
    parser.add_argument("--page-size", type=int, help="Templates fetched per page")
    parser.add_argument("--skip-salary", action="store_true", help="Only process recurring templates")
    return parser


def run(session, today: date, page_size: Optional[int] = None) -> int:
    """Process every user's due templates; returns the number of ledger entries created"""
    scheduler = RecurringScheduler(
        session=session,
        templates=RecurringTemplateRepository(session),
        ledger=LedgerRepository(session),
        page_size=page_size,
    )
    created = 0
    for result in scheduler.process_all(today):
        record_scheduler_run(result)
        created += result.created_count
    return created


def credit_salaries(session, today: date) -> int:
    """Credit salaries whose payday has come this month; returns the number credited"""
    creditor = SalaryCreditor(
        session=session,
        salaries=SalaryRepository(session),
        ledger=LedgerRepository(session),
    )
    result = creditor.credit_due(today)
    record_salary_run(result)
    return result.credited_count


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    setup_logging(settings.log_level)
    today = args.date or datetime.now(timezone.utc).date()

    session = SessionLocal()
    try:
        created = run(session, today, page_size=args.page_size)
        credited = 0 if args.skip_salary else credit_salaries(session, today)
    finally:
        session.close()

    logging.info(
        "Recurring job completed",
        extra={"step": "recurring_job", "as_of": today.isoformat(), "created_count": created, "salary_credited": credited},
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

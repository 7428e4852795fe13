"""Salary auto-credit - books each user's salary as income once per month"""

import logging
from datetime import date
from typing import Optional
from wealth_gateway.config import settings
from wealth_gateway.domain.exceptions import SalaryAlreadyCreditedError
from wealth_gateway.domain.models import LedgerEntry, MonthKey, Salary, SalaryCreditResult, TransactionKind
from wealth_gateway.utils.date_utils import month_end


def payday(salary: Salary, month: MonthKey) -> date:
    """Salary day of month within the given month, clamped to the month's last day"""
    last_day = month_end(month.first_day).day
    return date(month.year, month.month, min(salary.effective_date.day, last_day))


def plan_salary_credit(salary: Salary, today: date) -> Optional[LedgerEntry]:
    """
    Income entry for this month's salary, or None when payday has not come yet.

    The entry is dated at payday, so a run that missed the day still books
    the credit on the right date later in the month.
    """
    if salary.effective_date > today:
        return None
    day = payday(salary, MonthKey.of(today))
    if today < day:
        return None
    return LedgerEntry(
        amount_cents=salary.amount_cents,
        kind=TransactionKind.INCOME,
        occurred_on=day,
        category=settings.salary_category,
        description="Automated salary credit",
    )


class SalaryCreditor:
    """
    Credits the current salary of every user at most once per calendar month.

    An income entry in the salary category already booked this month, manual
    or automatic, counts as credited. The month claim is unique per user, so
    concurrent runs cannot both credit.

    Collaborators:
        session:  unit of work with commit() / rollback()
        salaries: salary repository (latest_effective, claim_month)
        ledger:   ledger repository (has_income_in_month, add_entry)
    """

    def __init__(self, session, salaries, ledger):
        self.session = session
        self.salaries = salaries
        self.ledger = ledger

    def credit_due(self, today: date) -> SalaryCreditResult:
        result = SalaryCreditResult()
        for salary in self.salaries.latest_effective(today):
            entry = plan_salary_credit(salary, today)
            if entry is not None:
                self._credit_one(salary, entry, result)
        return result

    def _credit_one(self, salary: Salary, entry: LedgerEntry, result: SalaryCreditResult) -> None:
        month = MonthKey.of(entry.occurred_on)
        log_extra = {"user_id": salary.user_id, "month": str(month)}
        try:
            if self.ledger.has_income_in_month(salary.user_id, settings.salary_category, month):
                raise SalaryAlreadyCreditedError(f"Salary for {month} already booked for {salary.user_id}")
            created = self.ledger.add_entry(salary.user_id, entry)
            self.salaries.claim_month(salary.user_id, month, created.id)
            self.session.commit()
            result.credited.append(created)

        except SalaryAlreadyCreditedError as e:
            self.session.rollback()
            result.skipped.append((salary.user_id, "already_credited"))
            logging.info(f"Salary not credited: {e}", extra=log_extra)

        except Exception as e:
            self.session.rollback()
            result.skipped.append((salary.user_id, "error"))
            logging.exception(f"Failed to credit salary: {e}", extra=log_extra)

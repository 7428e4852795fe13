"""GET and POST /v1/salary - the salary credited automatically each month"""

import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from wealth_gateway.api.v1.schemas import SalaryRequest, SalaryResponse
from wealth_gateway.api.dependencies import get_current_user_id, get_request_id, get_today
from wealth_gateway.infrastructure.database.session import get_db
from wealth_gateway.infrastructure.database.repositories import SalaryRepository
from wealth_gateway.domain.models import Salary

router = APIRouter()


def _salary_response(salary: Salary) -> SalaryResponse:
    return SalaryResponse(id=salary.id, amount_cents=salary.amount_cents, effective_date=salary.effective_date)


@router.get("/salary", response_model=SalaryResponse)
def get_salary(
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """Salary in effect today"""
    salary = SalaryRepository(db).current_for_user(user_id, today)
    if not salary:
        raise HTTPException(status_code=404, detail="No salary record found")
    return _salary_response(salary)


@router.post("/salary", response_model=SalaryResponse, status_code=201)
def set_salary(
    request_body: SalaryRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Record a salary from a date; posting the same date again replaces its amount"""
    try:
        salary = SalaryRepository(db).upsert(user_id, request_body.amount_cents, request_body.effective_date)
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    logging.info(
        "Salary updated",
        extra={"request_id": get_request_id(request), "user_id": user_id, "step": "salary_updated"},
    )
    return _salary_response(salary)

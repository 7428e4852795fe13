"""POST /v1/recurring/process and /v1/recurring/templates - recurring obligations"""

import time
import logging
from datetime import date
from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from wealth_gateway.api.v1.schemas import (
    CreateTemplateRequest,
    LedgerEntrySchema,
    ProcessRecurringResponse,
    TemplatePayloadSchema,
    TemplateResponse,
)
from wealth_gateway.api.dependencies import get_current_user_id, get_request_id, get_today
from wealth_gateway.infrastructure.database.session import get_db
from wealth_gateway.infrastructure.database.repositories import LedgerRepository, RecurringTemplateRepository
from wealth_gateway.domain.models import TemplatePayload
from wealth_gateway.domain.recurrence import decode_payload, encode_payload
from wealth_gateway.domain.scheduler import RecurringScheduler
from wealth_gateway.infrastructure.observability.metrics import record_scheduler_run
from wealth_gateway.infrastructure.observability.logging import log_scheduler_run

router = APIRouter()


@router.post("/recurring/process", response_model=ProcessRecurringResponse)
def process_recurring(
    request: Request,
    user_id: str = Depends(get_current_user_id),
    today: date = Depends(get_today),
    db: Session = Depends(get_db),
):
    """
    Materialize every recurring template due on or before today.

    Flow, per due template:
    1. Decode its payload (malformed payloads are skipped)
    2. Claim the occurrence: advance next due date, or deactivate "once" templates
    3. Create the ledger entry dated at the stored due date
    4. Commit; a failure rolls back that template only
    """
    start_time = time.time()
    request_id = get_request_id(request)

    scheduler = RecurringScheduler(
        session=db,
        templates=RecurringTemplateRepository(db),
        ledger=LedgerRepository(db),
    )
    result = scheduler.process_due(user_id, today, request_id=request_id)

    record_scheduler_run(result)
    log_scheduler_run(
        request_id,
        user_id,
        created_count=result.created_count,
        skipped_count=len(result.skipped),
        duration_ms=(time.time() - start_time) * 1000,
    )

    return ProcessRecurringResponse(
        created_count=result.created_count,
        created=[
            LedgerEntrySchema(
                id=entry.id,
                amount_cents=entry.amount_cents,
                kind=entry.kind,
                category=entry.category,
                description=entry.description,
                occurred_on=entry.occurred_on,
                recurring_template_id=entry.recurring_template_id,
            )
            for entry in result.created
        ],
    )


@router.post("/recurring/templates", response_model=TemplateResponse, status_code=201)
def create_template(
    request_body: CreateTemplateRequest,
    request: Request,
    user_id: str = Depends(get_current_user_id),
    db: Session = Depends(get_db),
):
    """Create a recurring template; the payload is validated here, not at processing time"""
    payload = TemplatePayload(
        amount_cents=request_body.payload.amount_cents,
        category=request_body.payload.category,
        kind=request_body.payload.kind,
        description=request_body.payload.description,
    )

    try:
        template = RecurringTemplateRepository(db).create(
            user_id=user_id,
            transaction_data=encode_payload(payload),
            frequency=request_body.frequency,
            next_due_date=request_body.next_due_date,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logging.error(f"Unexpected error: {e}", extra={"request_id": get_request_id(request)})
        raise HTTPException(status_code=500, detail="Internal server error")

    stored = decode_payload(template.payload)
    return TemplateResponse(
        id=template.id,
        payload=TemplatePayloadSchema(
            amount_cents=stored.amount_cents,
            category=stored.category,
            kind=stored.kind,
            description=stored.description,
        ),
        frequency=template.frequency,
        next_due_date=template.next_due_date,
        is_active=template.is_active,
    )

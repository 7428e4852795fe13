"""Recurrence rules - payload decoding, due date advancement, occurrence planning"""

import json
from datetime import date, timedelta
from typing import Optional
from wealth_gateway.domain.exceptions import InvalidTemplatePayloadError
from wealth_gateway.domain.models import (
    LedgerEntry,
    Occurrence,
    RecurrenceFrequency,
    RecurringTemplate,
    TemplatePayload,
    TransactionKind,
)
from wealth_gateway.utils.date_utils import add_months, add_years


def decode_payload(raw: str) -> TemplatePayload:
    """
    Parse a stored template payload.

    Raises:
        InvalidTemplatePayloadError: On invalid JSON, missing fields, or bad values
    """
    try:
        data = json.loads(raw)
        amount_cents = data["amount_cents"]
        kind = TransactionKind(data["kind"])
        category = data["category"]
        description = data.get("description") or ""
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise InvalidTemplatePayloadError(f"Undecodable template payload: {e}") from e

    # bool is an int subclass
    if isinstance(amount_cents, bool) or not isinstance(amount_cents, int):
        raise InvalidTemplatePayloadError(f"Template amount must be whole cents, got {amount_cents!r}")
    if not isinstance(category, str) or not category.strip():
        raise InvalidTemplatePayloadError(f"Template category must be a non-empty string, got {category!r}")
    if not isinstance(description, str):
        raise InvalidTemplatePayloadError(f"Template description must be a string, got {description!r}")

    if amount_cents <= 0:
        raise InvalidTemplatePayloadError(f"Template amount must be positive, got {amount_cents}")

    return TemplatePayload(
        amount_cents=amount_cents,
        category=category,
        kind=kind,
        description=description,
    )


def encode_payload(payload: TemplatePayload) -> str:
    return json.dumps(
        {
            "amount_cents": payload.amount_cents,
            "category": payload.category,
            "kind": payload.kind.value,
            "description": payload.description,
        }
    )


def next_due_date(current: date, frequency: RecurrenceFrequency) -> Optional[date]:
    """
    Advance a due date by one unit of the frequency.

    Monthly keeps the day of month where it exists (Jan 31 -> Feb 28/29).
    "once" never advances and returns None.
    """
    if frequency is RecurrenceFrequency.ONCE:
        return None
    if frequency is RecurrenceFrequency.DAILY:
        return current + timedelta(days=1)
    if frequency is RecurrenceFrequency.WEEKLY:
        return current + timedelta(days=7)
    if frequency is RecurrenceFrequency.MONTHLY:
        return add_months(current, 1)
    if frequency is RecurrenceFrequency.YEARLY:
        return add_years(current, 1)
    raise ValueError(f"Unhandled recurrence frequency: {frequency!r}")


def plan_occurrence(template: RecurringTemplate) -> Occurrence:
    """
    Decide what processing a due template produces.

    The entry is dated at the stored due date, not at processing time, and the
    next due date is derived from that stored date so an overdue template
    advances one step per run instead of jumping to today.
    """
    payload = decode_payload(template.payload)
    entry = LedgerEntry(
        amount_cents=payload.amount_cents,
        kind=payload.kind,
        occurred_on=template.next_due_date,
        category=payload.category,
        description=payload.description,
        recurring_template_id=template.id,
    )

    advanced = next_due_date(template.next_due_date, template.frequency)
    if advanced is None:
        return Occurrence(entry=entry, next_due_date=template.next_due_date, is_active=False)
    return Occurrence(entry=entry, next_due_date=advanced, is_active=template.is_active)

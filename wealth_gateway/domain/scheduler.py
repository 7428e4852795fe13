"""Recurring scheduler - materializes due templates into ledger entries"""

import logging
from datetime import date
from typing import List, Optional
from wealth_gateway.config import settings
from wealth_gateway.domain.exceptions import InvalidTemplatePayloadError, TemplateConflictError
from wealth_gateway.domain.models import RecurringTemplate, SchedulerResult
from wealth_gateway.domain.recurrence import plan_occurrence


class RecurringScheduler:
    """
    Batch processor for due recurring templates.

    Each template is handled in its own unit of work: claim the occurrence on
    the template (conditional update), write the ledger entry, commit. A
    failure rolls back that template only and the batch moves on.

    Collaborators:
        session:   unit of work with commit() / rollback()
        templates: template repository (list_due, claim, users_with_due)
        ledger:    ledger repository (add_entry)
    """

    def __init__(self, session, templates, ledger, page_size: Optional[int] = None):
        self.session = session
        self.templates = templates
        self.ledger = ledger
        self.page_size = page_size or settings.scheduler_page_size

    def process_due(self, user_id: str, today: date, request_id: str = "scheduler") -> SchedulerResult:
        """
        Materialize the next occurrence of every template due on or before today.

        At most one occurrence per template per call; a long-overdue template
        catches up one step per invocation.
        """
        result = SchedulerResult()
        after_id = None

        while True:
            # Keyset paging: templates still due after advancing are not revisited in this run
            page = self.templates.list_due(user_id, today, after_id=after_id, limit=self.page_size)
            if not page:
                break
            for template in page:
                self._process_one(template, result, request_id)
            after_id = page[-1].id
            if len(page) < self.page_size:
                break

        return result

    def process_all(self, today: date) -> List[SchedulerResult]:
        """Run process_due for every user holding due templates"""
        return [self.process_due(user_id, today) for user_id in self.templates.users_with_due(today)]

    def _process_one(self, template: RecurringTemplate, result: SchedulerResult, request_id: str) -> None:
        log_extra = {"request_id": request_id, "user_id": template.user_id, "template_id": template.id}
        try:
            occurrence = plan_occurrence(template)
            self.templates.claim(template, occurrence)
            created = self.ledger.add_entry(template.user_id, occurrence.entry)
            self.session.commit()
            result.created.append(created)

        except InvalidTemplatePayloadError as e:
            self.session.rollback()
            result.skipped.append((template.id, "invalid_payload"))
            logging.warning(f"Skipping recurring template: {e}", extra=log_extra)

        except TemplateConflictError as e:
            self.session.rollback()
            result.skipped.append((template.id, "conflict"))
            logging.info(f"Recurring template already processed: {e}", extra=log_extra)

        except Exception as e:
            self.session.rollback()
            result.skipped.append((template.id, "error"))
            logging.exception(f"Failed to process recurring template: {e}", extra=log_extra)

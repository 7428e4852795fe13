"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict
from pythonjsonlogger import jsonlogger
from wealth_gateway.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """JSON formatter stamping every record with time, level and service name"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Route the root logger to stdout as JSON lines"""
    logger = logging.getLogger()
    logger.setLevel(level)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s"))
    logger.addHandler(handler)


def log_scheduler_run(
    request_id: str,
    user_id: str,
    created_count: int,
    skipped_count: int,
    duration_ms: float,
) -> None:
    """Log the outcome of one recurring batch"""
    logging.info(
        "Recurring batch completed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "recurring_processed",
            "created_count": created_count,
            "skipped_count": skipped_count,
            "duration_ms": duration_ms,
        },
    )


def log_timeline(request_id: str, user_id: str, bucket_count: int, plan_count: int, duration_ms: float) -> None:
    logging.info(
        "Net worth timeline built",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "timeline_built",
            "bucket_count": bucket_count,
            "plan_count": plan_count,
            "duration_ms": duration_ms,
        },
    )

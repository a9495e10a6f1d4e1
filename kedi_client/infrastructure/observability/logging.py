"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger import jsonlogger

from kedi_client.config import settings


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str | None = None) -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level or settings.log_level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_dispatch(
    endpoint: str,
    method: str,
    status_code: Optional[int],
    outcome: str,
    duration_ms: float,
) -> None:
    """Log structured outcome of one dispatched API call (never the token)"""
    level = logging.INFO if outcome == "success" else logging.WARNING
    logging.log(
        level,
        "RevenueCat call completed",
        extra={
            "step": "dispatch_complete",
            "endpoint": endpoint,
            "method": method,
            "status_code": status_code,
            "outcome": outcome,
            "duration_ms": duration_ms,
        },
    )

"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from pythonjsonlogger.json import JsonFormatter
from credit_quoter.config import settings


class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s"
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_quote(
    request_id: str,
    lender_count: int,
    valid: bool,
    best_lender_id: Optional[int],
    duration_ms: float,
    client_reference: Optional[str] = None,
) -> None:
    """Log structured quote outcome for analysis"""
    logging.info(
        "Quote completed",
        extra={
            "request_id": request_id,
            "client_reference": client_reference,
            "step": "quote_complete",
            "validation_outcome": "ok" if valid else "invalid",
            "lender_count": lender_count,
            "best_lender_id": best_lender_id,
            "duration_ms": duration_ms,
        },
    )

"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, TextIO
from pythonjsonlogger import jsonlogger

from fingrip_gateway.config import settings

# Third-party loggers that log every outbound request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


class ServiceJsonFormatter(jsonlogger.JsonFormatter):
    """Adds a UTC timestamp and the service name to every record"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.setdefault("timestamp", datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat())
        log_record["service"] = settings.service_name


def setup_logging(level: str = "INFO", stream: TextIO = sys.stdout) -> None:
    """Send all records to `stream` as one JSON object per line"""
    handler = logging.StreamHandler(stream)
    handler.setFormatter(
        ServiceJsonFormatter("%(levelname)s %(name)s %(message)s", rename_fields={"levelname": "level"})
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_score(request_id: str, user_id: str, overall_score: float, band: str, duration_ms: float) -> None:
    """Log a computed financial health score"""
    logging.info(
        "Score computed",
        extra={
            "request_id": request_id,
            "user_id": user_id,
            "step": "score_complete",
            "overall_score": overall_score,
            "score_band": band,
            "duration_ms": round(duration_ms, 2),
        },
    )


def log_bank_sync(request_id: str, user_id: str, fetched: int, inserted: int) -> None:
    logging.info(
        "Bank sync completed",
        extra={
            "request_id": request_id,
            "step": "bank_sync_complete",
            "user_id": user_id,
            "fetched": fetched,
            "imported": inserted,
            "skipped": fetched - inserted,
        },
    )

"""Structured JSON logging for production observability"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger import jsonlogger

from fraud_gateway.domain.models import Verdict


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with timestamp and service metadata"""

    def __init__(self, *args: Any, service_name: str = "fraud-gateway", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service_name = service_name

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service_name


def setup_logging(level: str = "INFO", service_name: str = "fraud-gateway") -> None:
    """Configure structured JSON logging"""
    logger = logging.getLogger()
    logger.setLevel(level)

    # Remove existing handlers
    logger.handlers.clear()

    # JSON handler for stdout
    handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(name)s %(message)s",
        service_name=service_name,
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def log_verdict(
    request_id: str,
    session_id: str,
    verdict: Verdict,
    duration_ms: float,
) -> None:
    """Log structured evaluation outcome for audit"""
    logging.info(
        "Evaluation completed",
        extra={
            "request_id": request_id,
            "session_id": session_id,
            "step": "evaluation_complete",
            "transaction_id": verdict.transaction_id,
            "catalog": verdict.catalog_name,
            "risk_score": verdict.score,
            "risk_tier": verdict.tier.value,
            "recommendation": verdict.recommendation.value,
            "factors": [factor.rule for factor in verdict.factors],
            "duration_ms": duration_ms,
        },
    )

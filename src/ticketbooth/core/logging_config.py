"""
Structured logging configuration with trace IDs
"""
import contextvars
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pythonjsonlogger import jsonlogger

from ticketbooth.core.config import settings

# Context variable to store trace ID across async calls
trace_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar('trace_id', default=None)

# Booking fields copied from `extra=` onto the JSON record
BOOKING_FIELDS = ('user_id', 'event_date_id', 'order_id', 'seating_mode', 'error_code', 'duration_ms')


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter with trace ID and additional fields"""

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)

        log_record['timestamp'] = datetime.now(timezone.utc).isoformat()
        log_record['level'] = record.levelname

        trace_id = trace_id_var.get()
        if trace_id:
            log_record['trace_id'] = trace_id

        log_record['service'] = settings.SERVICE_NAME
        log_record['environment'] = settings.ENVIRONMENT

        for field in BOOKING_FIELDS:
            if hasattr(record, field):
                log_record[field] = getattr(record, field)


def setup_logging() -> logging.Logger:
    """Configure structured JSON logging"""
    if settings.LOG_JSON:
        formatter = CustomJsonFormatter('%(timestamp)s %(level)s %(name)s %(message)s')
    else:
        formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    root_logger = logging.getLogger()
    root_logger.setLevel(settings.LOG_LEVEL)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if settings.LOG_FILE:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # Reduce noise from libraries
    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('sqlalchemy.engine').setLevel(logging.WARNING)

    return root_logger


def get_trace_id() -> Optional[str]:
    """Get current trace ID"""
    return trace_id_var.get()


def set_trace_id(trace_id: str):
    """Set trace ID for current context"""
    trace_id_var.set(trace_id)


def generate_trace_id() -> str:
    """Generate a new trace ID"""
    return str(uuid.uuid4())

"""Structured logging utilities."""
import json
import logging
import traceback
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from address_verifier.utils.error_tracking import capture_exception

LOGGER_NAME = "address_verifier"


def setup_logging(level: str = "INFO"):
    """Setup structured JSON logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(message)s',
        handlers=[logging.StreamHandler()]
    )


def log_structured(level: str, message: str, **kwargs):
    """
    Log structured JSON message.

    Args:
        level: Log level (info, warning, error, etc.)
        message: Log message
        **kwargs: Additional structured fields
    """
    log_entry = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level.upper(),
        "message": message,
        **kwargs
    }

    logger = logging.getLogger(LOGGER_NAME)
    getattr(logger, level.lower(), logger.info)(json.dumps(log_entry, default=str))


def log_error(error: Exception, context: Optional[Dict[str, Any]] = None):
    """
    Log an exception with context and forward it to Sentry.

    Args:
        error: The exception that was caught
        context: Module/function and any identifying fields
    """
    context = context or {}
    log_structured(
        "error",
        str(error) or type(error).__name__,
        error_type=type(error).__name__,
        traceback=traceback.format_exception_only(type(error), error)[-1].strip(),
        **context
    )
    capture_exception(error, context)


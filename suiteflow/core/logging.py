import contextvars
import logging
import re
from typing import Any

import structlog
from structlog.types import EventDict

correlation_id_context: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "correlation_id",
    default=None,
)

_SENSITIVE_PATTERNS = [
    # API keys and tokens
    (
        re.compile(
            r'(["\']?(?:api[_-]?)?(?:key|token|secret|password|passwd|pwd)["\']?\s*[:=]\s*["\']?)([^"\']+)(["\']?)',
            re.IGNORECASE,
        ),
        r"\1***API_KEY_OR_TOKEN_REDACTED***\3",
    ),
    (re.compile(r"(Bearer\s+)([A-Za-z0-9\-_]+)", re.IGNORECASE), r"\1***BEARER_TOKEN_REDACTED***"),
    # MongoDB URLs with credentials
    (re.compile(r"(mongodb(?:\+srv)?://[^:/]+:)([^@]+)(@)", re.IGNORECASE), r"\1***MONGODB_REDACTED***\3"),
    (re.compile(r"(https?://[^:/]+:)([^@]+)(@)", re.IGNORECASE), r"\1***URL_CREDS_REDACTED***\3"),
]


def sanitize(value: str) -> str:
    """Mask credentials and tokens embedded in a log string."""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        value = pattern.sub(replacement, value)
    return value


def add_correlation_id(_: Any, __: str, event_dict: EventDict) -> EventDict:
    correlation_id = correlation_id_context.get()
    if correlation_id and "correlation_id" not in event_dict:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def sanitize_strings(_: Any, __: str, event_dict: EventDict) -> EventDict:
    for key, value in event_dict.items():
        if isinstance(value, str):
            event_dict[key] = sanitize(value)
    return event_dict


def setup_logger(log_level: str = "INFO") -> structlog.stdlib.BoundLogger:
    """Configure structlog for JSON output and return the application logger."""
    level = getattr(logging, log_level.upper(), logging.DEBUG)
    logging.basicConfig(format="%(message)s", level=level)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_correlation_id,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            sanitize_strings,
            structlog.processors.JSONRenderer(ensure_ascii=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    logger: structlog.stdlib.BoundLogger = structlog.get_logger("suiteflow")
    return logger

import structlog
import logging
import re
import sys
from typing import Any, MutableMapping

from src.config import AppEnvironment

# Substrings, so `session_token`, `set_cookie` and `Authorization` are caught too
SENSITIVE_KEY_PARTS = ("password", "token", "cookie", "secret", "authorization")

# Session cookie pairs and bearer credentials embedded in free text (headers, error strings)
_CREDENTIAL_IN_TEXT = re.compile(r"(faasr_session=|Bearer\s+)[^;,\s]+", re.IGNORECASE)

MASK = "***"


def _is_sensitive(key: str) -> bool:
    key = key.lower()
    return any(part in key for part in SENSITIVE_KEY_PARTS)


def _security_filter(logger: Any, method_name: str, event_dict: MutableMapping[str, Any]) -> MutableMapping[str, Any]:
    """
    Mask credentials in log events.

    Values under sensitive keys are replaced entirely. Other string values
    keep their text, with any session cookie or bearer token blanked out.
    """
    for key, value in event_dict.items():
        if _is_sensitive(key):
            event_dict[key] = MASK
        elif isinstance(value, str):
            event_dict[key] = _CREDENTIAL_IN_TEXT.sub(lambda m: m.group(1) + MASK, value)
    return event_dict


def setup_logging(env: AppEnvironment) -> None:
    """
    Configure structlog based on environment.
    Development renders to a colored console, everything else to JSON lines.
    The test environment only reports warnings and above.
    """
    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        _security_filter,
    ]

    if env is AppEnvironment.DEV:
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.extend([
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ])

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # httpx logs every request, URL included, at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=logging.WARNING if env is AppEnvironment.TEST else logging.INFO,
    )

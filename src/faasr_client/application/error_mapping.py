"""
Maps remote API failures to user-facing messages.

The server's own `error` text wins when present. Otherwise the HTTP status
is looked up in a fixed table so the same status always yields the same text.
"""
import json
from typing import Any, Optional

import structlog

from ..domain.errors import ApiError, ClientError
from ..domain.models import ErrorResponse

logger = structlog.get_logger()


class ApiMessages:
    ERR_BAD_REQUEST = "Invalid request. Please check your input and try again."
    ERR_UNAUTHORIZED = "Authentication required. Please log in again."
    ERR_FORBIDDEN = "Permission denied. You do not have access to this resource."
    ERR_NOT_FOUND = "The requested resource was not found."
    ERR_RATE_LIMITED = "Too many requests. Please wait a moment and try again."
    ERR_SERVER = "Server error. Please try again later."
    ERR_STATUS = "Request failed with status {}"

    ERR_INVALID_RESPONSE = "Invalid response from server"
    ERR_NETWORK = "Network error: unable to reach the server"
    ERR_INSTALL_FAILED = "Failed to initiate installation"


_STATUS_MESSAGES = {
    400: ApiMessages.ERR_BAD_REQUEST,
    401: ApiMessages.ERR_UNAUTHORIZED,
    403: ApiMessages.ERR_FORBIDDEN,
    404: ApiMessages.ERR_NOT_FOUND,
    429: ApiMessages.ERR_RATE_LIMITED,
}


def message_for_status(status: int) -> str:
    """Fixed status -> message lookup."""
    if status in _STATUS_MESSAGES:
        return _STATUS_MESSAGES[status]
    if 500 <= status <= 599:
        return ApiMessages.ERR_SERVER
    return ApiMessages.ERR_STATUS.format(status)


def parse_error_body(body: bytes) -> Optional[ErrorResponse]:
    """
    Parse an error payload `{success: false, error, details?}`.
    Returns None when the body is empty, not JSON, or not a JSON object.

    Fields are read one by one: a malformed `success` or `details` must not
    hide the server's `error` text. A non-string `error` is dropped.
    """
    if not body:
        return None
    try:
        data = json.loads(body)
    except ValueError:
        # json.JSONDecodeError and UnicodeDecodeError are both ValueError
        return None
    if not isinstance(data, dict):
        return None

    error = data.get("error")
    return ErrorResponse(
        error=error if isinstance(error, str) else None,
        details=data.get("details"),
    )


def api_error_from_response(status: int, body: bytes) -> ApiError:
    """
    Build the ApiError for a non-2xx response.

    Args:
        status: HTTP status code.
        body: Raw response body, possibly empty.

    Returns:
        ApiError whose user_message is the server's `error` text if non-empty,
        the status table entry otherwise.
    """
    payload = parse_error_body(body)
    raw_message = payload.error if payload else None
    details = payload.details if payload else None

    if raw_message:
        user_message = raw_message
    else:
        if payload is None and body:
            logger.warning("error_body_unparseable", status=status)
        user_message = message_for_status(status)

    return ApiError(
        http_status=status,
        user_message=user_message,
        raw_message=raw_message,
        details=details,
    )


def describe_error(error: Any, fallback: str) -> str:
    """
    Normalize an arbitrary error value into a descriptive string.

    Non-empty strings and exception messages pass through. Anything else
    (None, dicts, exceptions without a message) becomes `fallback`.
    """
    if isinstance(error, ClientError):
        return error.user_message or fallback
    if isinstance(error, str):
        return error if error.strip() else fallback
    if isinstance(error, BaseException):
        message = str(error)
        return message if message.strip() else fallback
    return fallback

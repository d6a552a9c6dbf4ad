from typing import Any, Optional


class ClientError(Exception):
    """
    Base class for failures surfaced to the user.
    `user_message` is always a human-readable string.
    """
    def __init__(self, user_message: str):
        super().__init__(user_message)
        self.user_message = user_message

    def __str__(self) -> str:
        return self.user_message


class ApiError(ClientError):
    """Non-2xx response from the remote API."""
    def __init__(
        self,
        http_status: int,
        user_message: str,
        raw_message: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(user_message)
        self.http_status = http_status
        self.raw_message = raw_message
        self.details = details if details is not None else []

    def __repr__(self) -> str:
        return f"ApiError(http_status={self.http_status}, user_message={self.user_message!r})"


class NetworkError(ClientError):
    """The request never reached the server or no response came back."""


class DecodeError(ClientError):
    """A response body could not be parsed."""


class IdentityBackendError(ClientError):
    """The identity backend could not produce or clear a session."""

from typing import Any, Callable, Optional, Protocol

from .events import SessionChanged
from .models import Session, UploadResponse


class ISubscription(Protocol):
    def unsubscribe(self) -> None:
        ...


class IScheduledCall(Protocol):
    def cancel(self) -> None:
        ...


class IScheduler(Protocol):
    """
    Cancellable delayed callbacks. Delays are in milliseconds.
    """
    def schedule_after(self, delay_ms: int, callback: Callable[[], Any]) -> IScheduledCall:
        ...


class IIdentityBackend(Protocol):
    """
    Issues and refreshes sessions, accepts sign-out, and pushes changes.
    Every coroutine raises ClientError on failure.
    """
    async def get_session(self) -> Optional[Session]:
        ...

    async def refresh_session(self) -> Optional[Session]:
        ...

    async def sign_out(self) -> None:
        ...

    def subscribe(self, handler: Callable[[SessionChanged], None]) -> ISubscription:
        ...


class IUploader(Protocol):
    """
    Upload side of the remote API.
    """
    async def upload(self, file_name: str, raw_bytes: bytes) -> UploadResponse:
        ...

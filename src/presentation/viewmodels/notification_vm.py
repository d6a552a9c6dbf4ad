import dataclasses
from typing import Callable, Optional

import structlog

from src.faasr_client.application.event_emitter import EventEmitter
from src.faasr_client.domain.interfaces import IScheduledCall, IScheduler
from src.faasr_client.domain.models import UploadResponse
from src.presentation.resources.strings import UIStrings
from src.presentation.state.app_state import NotificationType

logger = structlog.get_logger()


@dataclasses.dataclass(frozen=True)
class Notification:
    type: NotificationType
    message: str
    title: Optional[str] = None
    auto_dismiss_ms: int = 0


def upload_success_notification(response: UploadResponse, auto_dismiss_ms: int = 5000) -> Notification:
    return Notification(
        type=NotificationType.SUCCESS,
        title=UIStrings.TITLE_UPLOAD_SUCCESS,
        message=response.message or UIStrings.MSG_UPLOAD_SUCCESS,
        auto_dismiss_ms=auto_dismiss_ms,
    )


def upload_error_notification(error: Exception) -> Notification:
    return Notification(
        type=NotificationType.ERROR,
        title=UIStrings.TITLE_UPLOAD_FAILED,
        message=str(error) or UIStrings.MSG_UPLOAD_FAILED,
    )


class NotificationController:
    """
    Holds the single notification currently on screen.

    Showing a new notification replaces the old one and restarts its
    auto-dismiss timer. `auto_dismiss_ms == 0` keeps it until dismissed.
    """

    def __init__(self, scheduler: IScheduler, on_dismiss: Optional[Callable[[Notification], None]] = None):
        self._scheduler = scheduler
        self._on_dismiss = on_dismiss
        self._current: Optional[Notification] = None
        self._timer: Optional[IScheduledCall] = None
        self._closed = False
        self.changed: EventEmitter[Optional[Notification]] = EventEmitter("notification")

    @property
    def current(self) -> Optional[Notification]:
        return self._current

    @property
    def visible(self) -> bool:
        return self._current is not None

    def show(self, notification: Notification) -> None:
        if self._closed:
            return
        self._cancel_timer()
        self._current = notification
        logger.info("notification_shown", type=notification.type.value, title=notification.title)
        self.changed.emit(notification)

        if notification.auto_dismiss_ms > 0:
            self._timer = self._scheduler.schedule_after(notification.auto_dismiss_ms, self._auto_dismiss)

    def dismiss(self) -> None:
        if self._closed or self._current is None:
            return
        self._cancel_timer()
        dismissed = self._current
        self._current = None
        self.changed.emit(None)
        if self._on_dismiss:
            self._on_dismiss(dismissed)

    def close(self) -> None:
        self._cancel_timer()
        self._closed = True

    def _auto_dismiss(self) -> None:
        self._timer = None
        self.dismiss()

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

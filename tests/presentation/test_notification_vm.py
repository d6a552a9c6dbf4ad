from unittest.mock import MagicMock

import pytest

from src.faasr_client.domain.errors import ApiError
from src.faasr_client.domain.models import UploadResponse
from src.presentation.resources.strings import UIStrings
from src.presentation.state.app_state import NotificationType
from src.presentation.viewmodels.notification_vm import (
    Notification,
    NotificationController,
    upload_error_notification,
    upload_success_notification,
)

@pytest.fixture
def on_dismiss():
    return MagicMock()

@pytest.fixture
def notifications(scheduler, on_dismiss):
    return NotificationController(scheduler, on_dismiss=on_dismiss)

def test_show_and_manual_dismiss(notifications, on_dismiss):
    note = Notification(type=NotificationType.INFO, message="hello")
    notifications.show(note)
    assert notifications.current == note

    notifications.dismiss()

    assert not notifications.visible
    on_dismiss.assert_called_once_with(note)

def test_auto_dismiss_fires_after_delay(notifications, scheduler, on_dismiss):
    notifications.show(Notification(type=NotificationType.SUCCESS, message="done", auto_dismiss_ms=5000))

    scheduler.advance(4999)
    assert notifications.visible

    scheduler.advance(1)
    assert not notifications.visible
    on_dismiss.assert_called_once()

def test_zero_auto_dismiss_stays(notifications, scheduler):
    notifications.show(Notification(type=NotificationType.ERROR, message="boom"))
    scheduler.advance(60_000)
    assert notifications.visible
    assert scheduler.pending == []

def test_new_notification_restarts_timer(notifications, scheduler):
    notifications.show(Notification(type=NotificationType.SUCCESS, message="one", auto_dismiss_ms=5000))
    scheduler.advance(3000)
    second = Notification(type=NotificationType.ERROR, message="two")
    notifications.show(second)

    scheduler.advance(5000)
    assert notifications.current == second

def test_close_cancels_timer(notifications, scheduler, on_dismiss):
    notifications.show(Notification(type=NotificationType.SUCCESS, message="done", auto_dismiss_ms=5000))
    notifications.close()

    scheduler.advance(5000)
    on_dismiss.assert_not_called()
    assert scheduler.pending == []

def test_upload_notifications():
    success = upload_success_notification(
        UploadResponse(success=True, message="", file_name="wf.json", commit_sha="abc")
    )
    assert success.type == NotificationType.SUCCESS
    assert success.title == UIStrings.TITLE_UPLOAD_SUCCESS
    assert success.message == UIStrings.MSG_UPLOAD_SUCCESS
    assert success.auto_dismiss_ms == 5000

    failure = upload_error_notification(ApiError(500, "Server error. Please try again later."))
    assert failure.type == NotificationType.ERROR
    assert failure.message == "Server error. Please try again later."
    assert failure.auto_dismiss_ms == 0

    assert upload_error_notification(RuntimeError()).message == UIStrings.MSG_UPLOAD_FAILED

import asyncio
import sys
from typing import Optional

import structlog

from src.config import get_settings
from src.faasr_client.api.client import RemoteApiClient
from src.faasr_client.application.scheduler import AsyncioScheduler
from src.faasr_client.infrastructure.identity_backend import ApiIdentityBackend
from src.faasr_client.infrastructure.logging import setup_logging
from src.presentation.services.file_source import LocalFile
from src.presentation.services.workflow_validator import WorkflowValidator
from src.presentation.state.app_state import SubmissionState
from src.presentation.viewmodels.notification_vm import (
    Notification,
    NotificationController,
    upload_error_notification,
    upload_success_notification,
)
from src.presentation.viewmodels.session_vm import SessionController
from src.presentation.viewmodels.submission_vm import SubmissionController

logger = structlog.get_logger()

USAGE = "usage: python -m src.main <workflow.json>"


def _print_notification(notification: Optional[Notification]) -> None:
    if notification is None:
        return
    prefix = f"{notification.title}: " if notification.title else ""
    print(f"[{notification.type.value}] {prefix}{notification.message}")


async def run(file_path: str) -> int:
    """
    Headless upload: load the session, validate the file, upload it.
    Returns the process exit code.
    """
    # 1. Load Configuration
    settings = get_settings()
    setup_logging(settings.env)
    logger.info("configuration_loaded", env=settings.env.value, api=settings.api.base_url)

    scheduler = AsyncioScheduler()

    # 2. Initialize Dependencies (Services)
    async with RemoteApiClient(settings.api.base_url, timeout_sec=settings.api.timeout_sec) as api:
        identity = ApiIdentityBackend(api)
        notifications = NotificationController(scheduler)
        notifications.changed.subscribe(_print_notification)

        # 3. Initialize Controllers
        session = await SessionController.create(identity)
        if not session.is_authenticated:
            print(session.error or "Not logged in. Install the GitHub App first.", file=sys.stderr)
            session.close()
            return 1

        submission = SubmissionController(
            uploader=api,
            scheduler=scheduler,
            validator=WorkflowValidator(settings.upload.max_size_bytes),
            reset_delay_ms=settings.upload.reset_delay_ms,
            on_upload_success=lambda r: notifications.show(
                upload_success_notification(r, settings.notification.success_auto_dismiss_ms)
            ),
            on_upload_error=lambda e: notifications.show(upload_error_notification(e)),
        )

        # 4. Execute
        try:
            outcome = await submission.select_file(LocalFile(file_path))
            if outcome is None or not outcome.is_valid:
                print(submission.last_error, file=sys.stderr)
                return 1

            await submission.submit()
            return 0 if submission.state is SubmissionState.SUCCEEDED else 1
        finally:
            submission.close()
            notifications.close()
            session.close()


def main():
    """
    Main entry point for the command line.
    """
    if len(sys.argv) != 2:
        print(USAGE, file=sys.stderr)
        sys.exit(2)

    try:
        sys.exit(asyncio.run(run(sys.argv[1])))
    except KeyboardInterrupt:
        sys.exit(130)
    except Exception as e:
        logger.critical("application_failed", error=str(e), exc_info=True)
        sys.exit(1)


if __name__ == "__main__":
    main()

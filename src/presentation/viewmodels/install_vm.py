from typing import Callable, Optional

import structlog

from src.faasr_client.application.error_mapping import describe_error
from src.faasr_client.domain.interfaces import IScheduledCall, IScheduler
from src.presentation.interfaces.protocols import IInstallApi, IInstallationExchange
from src.presentation.resources.strings import UIStrings
from src.presentation.state.app_state import NotificationType
from src.presentation.viewmodels.notification_vm import Notification, NotificationController
from src.presentation.viewmodels.session_vm import SessionController

logger = structlog.get_logger()


class InstallController:
    """
    Install button and installation callback page.

    `redirect` receives the GitHub installation URL; `navigate` receives the
    route to open once an installation has completed.
    """

    def __init__(
        self,
        api: IInstallApi,
        exchange: IInstallationExchange,
        session: SessionController,
        notifications: NotificationController,
        scheduler: IScheduler,
        redirect: Callable[[str], None],
        navigate: Callable[[str], None],
        redirect_delay_ms: int = 2000,
        on_install_error: Optional[Callable[[Exception], None]] = None,
    ):
        self._api = api
        self._exchange = exchange
        self._session = session
        self._notifications = notifications
        self._scheduler = scheduler
        self._redirect = redirect
        self._navigate = navigate
        self._redirect_delay_ms = redirect_delay_ms
        self._on_install_error = on_install_error

        self._is_loading = False
        self._is_processing = False
        self._pending_navigation: Optional[IScheduledCall] = None
        self._closed = False

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def is_processing(self) -> bool:
        return self._is_processing

    async def start_install(self) -> None:
        """Fetches the installation URL and redirects to it. Repeated clicks are ignored."""
        if self._is_loading or self._closed:
            return

        self._is_loading = True
        try:
            url = await self._api.install()
        except Exception as e:
            logger.warning("install_start_failed", error=str(e))
            self._is_loading = False
            if self._on_install_error:
                self._on_install_error(e)
            return

        # Stays loading: the page is being left
        self._redirect(url)

    async def process_callback(self, installation_id: Optional[str], setup_action: Optional[str] = None) -> bool:
        """
        Completes the installation after GitHub redirects back.

        Returns:
            bool: True if the installation succeeded.
        """
        if not installation_id:
            self._notifications.show(Notification(
                type=NotificationType.ERROR,
                title=UIStrings.TITLE_INSTALL_ERROR,
                message=UIStrings.MSG_INSTALL_MISSING_ID,
            ))
            return False

        self._is_processing = True
        self._notifications.show(Notification(type=NotificationType.INFO, message=UIStrings.MSG_INSTALL_PROCESSING))

        try:
            response = await self._exchange.exchange_installation(installation_id, setup_action or None)
        except Exception as e:
            logger.warning("install_callback_failed", installation_id=installation_id, error=str(e))
            self._notifications.show(Notification(
                type=NotificationType.ERROR,
                title=UIStrings.TITLE_INSTALL_ERROR,
                message=describe_error(e, UIStrings.MSG_INSTALL_UNEXPECTED),
            ))
            return False
        finally:
            self._is_processing = False

        if not response.success:
            logger.warning("install_incomplete", installation_id=installation_id)
            self._notifications.show(Notification(
                type=NotificationType.ERROR,
                title=UIStrings.TITLE_INSTALL_FAILED,
                message=response.message or UIStrings.MSG_INSTALL_INCOMPLETE,
            ))
            return False

        logger.info("install_completed", user_login=response.user.login, fork_status=response.fork.status.value)
        self._notifications.show(Notification(
            type=NotificationType.SUCCESS,
            title=UIStrings.TITLE_INSTALL_SUCCESS,
            message=UIStrings.MSG_INSTALL_WELCOME.format(response.user.login, response.fork.url),
        ))

        await self._session.refresh()

        if not self._closed:
            self._pending_navigation = self._scheduler.schedule_after(
                self._redirect_delay_ms, self._navigate_to_upload
            )
        return True

    def close(self) -> None:
        self._closed = True
        if self._pending_navigation is not None:
            self._pending_navigation.cancel()
            self._pending_navigation = None

    def _navigate_to_upload(self) -> None:
        self._pending_navigation = None
        if not self._closed:
            self._navigate(UIStrings.ROUTE_UPLOAD)

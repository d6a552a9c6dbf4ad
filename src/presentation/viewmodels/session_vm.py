from typing import Optional

import structlog

from src.faasr_client.application.error_mapping import describe_error
from src.faasr_client.application.event_emitter import EventEmitter
from src.faasr_client.domain.events import SessionChanged
from src.faasr_client.domain.interfaces import IIdentityBackend
from src.faasr_client.domain.models import Session
from src.presentation.resources.strings import UIStrings
from src.presentation.state.app_state import SessionState

logger = structlog.get_logger()

_UNSET = object()


class SessionController:
    """
    Single source of truth for who is logged in.

    Three independent writers update the session: the initial load, pushed
    change notifications, and explicit refresh/logout. They are not
    sequenced; whichever completes last wins. A slow initial load can
    therefore overwrite a newer notification.
    """

    def __init__(self, identity: IIdentityBackend):
        self._identity = identity
        self.state_changed: EventEmitter[SessionState] = EventEmitter("session_state")
        self.error_occurred: EventEmitter[str] = EventEmitter("session_error")

        self._session: Optional[Session] = None
        self._error: Optional[str] = None
        self._is_loading = False
        self._initialized = False
        self._closed = False

        self._subscription = identity.subscribe(self._on_session_changed)

    @classmethod
    async def create(cls, identity: IIdentityBackend) -> "SessionController":
        """Builds the controller and runs the initial session load."""
        controller = cls(identity)
        await controller.initialize()
        return controller

    @property
    def session(self) -> Optional[Session]:
        return self._session

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def is_loading(self) -> bool:
        return self._is_loading

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> SessionState:
        if self._is_loading:
            return SessionState.LOADING
        if self._session is not None:
            return SessionState.AUTHENTICATED
        if not self._initialized:
            return SessionState.UNINITIALIZED
        if self._error is not None:
            return SessionState.ERRORED
        return SessionState.UNAUTHENTICATED

    async def initialize(self) -> None:
        """
        Loads the current session. Runs at most once per controller.
        """
        if self._initialized or self._closed:
            logger.warning("session_initialize_ignored", closed=self._closed)
            return

        self._initialized = True
        self._update(is_loading=True)

        try:
            session = await self._identity.get_session()
        except Exception as e:
            message = describe_error(e, UIStrings.ERR_LOAD_SESSION_FAILED)
            logger.warning("session_load_failed", error=message)
            self._update(session=None, error=message, is_loading=False)
            return

        logger.info("session_loaded", authenticated=session is not None)
        self._update(session=session, is_loading=False)

    async def refresh(self) -> None:
        """
        Re-fetches the session. A missing session is a valid logged-out result;
        a failure clears the session and records the error.
        """
        if self._closed:
            return

        self._initialized = True
        self._update(is_loading=True, error=None)

        try:
            session = await self._identity.refresh_session()
        except Exception as e:
            message = describe_error(e, UIStrings.ERR_REFRESH_FAILED)
            logger.warning("session_refresh_failed", error=message)
            self._update(session=None, error=message, is_loading=False)
            return

        logger.info("session_refreshed", authenticated=session is not None)
        self._update(session=session, is_loading=False)

    async def logout(self) -> None:
        """
        Signs out. On failure the current session is kept and only the error is set.
        """
        if self._closed:
            return

        self._update(error=None)

        try:
            await self._identity.sign_out()
        except Exception as e:
            message = describe_error(e, UIStrings.ERR_LOGOUT_FAILED)
            logger.warning("logout_failed", error=message)
            self._update(error=message)
            return

        logger.info("logged_out")
        self._update(session=None)

    def close(self) -> None:
        """Releases the change subscription. No state is written afterwards."""
        if self._closed:
            return
        self._closed = True
        self._subscription.unsubscribe()
        logger.debug("session_controller_closed")

    def _on_session_changed(self, event: SessionChanged) -> None:
        logger.info("session_change_received", kind=event.kind.value, authenticated=event.session is not None)
        self._update(session=event.session, error=None)

    def _update(self, session=_UNSET, error=_UNSET, is_loading=_UNSET) -> None:
        """Applies a state write and notifies observers if the visible state moved."""
        if self._closed:
            return

        previous = self.state
        if session is not _UNSET:
            self._session = session
        if error is not _UNSET:
            self._error = error
        if is_loading is not _UNSET:
            self._is_loading = is_loading

        if self.state != previous:
            self.state_changed.emit(self.state)
        if error is not _UNSET and error is not None:
            self.error_occurred.emit(error)

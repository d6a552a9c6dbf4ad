from datetime import datetime, timezone
from typing import Callable, Optional

import jwt
import structlog
from pydantic import ValidationError

from ..api.client import RemoteApiClient
from ..application.event_emitter import EventEmitter, Subscription
from ..domain.errors import IdentityBackendError
from ..domain.events import SessionChangeKind, SessionChanged
from ..domain.models import InstallationResponse, Session

logger = structlog.get_logger()


def session_from_token(token: str) -> Session:
    """
    Build a Session from the session JWT.

    The signature is not checked here; the server verifies every request
    that carries the cookie. Only the payload shape is validated.

    Raises:
        IdentityBackendError: If the token is malformed or lacks session claims.
    """
    try:
        claims = jwt.decode(token, options={"verify_signature": False})
        return Session(
            installation_id=claims["installationId"],
            user_login=claims["userLogin"],
            user_id=claims["userId"],
            avatar_url=claims.get("avatarUrl"),
            token=token,
            created_at=datetime.fromtimestamp(claims["iat"], tz=timezone.utc),
            expires_at=datetime.fromtimestamp(claims["exp"], tz=timezone.utc),
        )
    except (jwt.InvalidTokenError, KeyError, TypeError, ValueError, ValidationError) as e:
        logger.warning("session_token_invalid", error=str(e))
        raise IdentityBackendError("Session token is invalid") from e


class ApiIdentityBackend:
    """
    Identity backend over the workflow API's cookie session.
    Sign-in, refresh and sign-out are pushed to subscribers as SessionChanged.
    """

    def __init__(self, api: RemoteApiClient):
        self._api = api
        self._changes: EventEmitter[SessionChanged] = EventEmitter("session_changes")

    def subscribe(self, handler: Callable[[SessionChanged], None]) -> Subscription:
        return self._changes.subscribe(handler)

    async def get_session(self) -> Optional[Session]:
        response = await self._api.get_session()
        if not response.authenticated:
            return None
        token = self._api.session_token
        if not token:
            raise IdentityBackendError("Session cookie is missing")
        return session_from_token(token)

    async def refresh_session(self) -> Optional[Session]:
        session = await self.get_session()
        kind = SessionChangeKind.TOKEN_REFRESHED if session else SessionChangeKind.SIGNED_OUT
        self._changes.emit(SessionChanged(kind=kind, session=session))
        return session

    async def sign_out(self) -> None:
        await self._api.logout()
        logger.info("signed_out")
        self._changes.emit(SessionChanged(kind=SessionChangeKind.SIGNED_OUT, session=None))

    async def exchange_installation(
        self, installation_id: str, setup_action: Optional[str] = None
    ) -> InstallationResponse:
        """
        Run the installation callback. On success the server sets the session
        cookie, which is announced to subscribers as a sign-in.
        """
        response = await self._api.callback(installation_id, setup_action)
        if response.success:
            token = self._api.session_token
            if token:
                session = session_from_token(token)
                logger.info("signed_in", user_login=session.user_login)
                self._changes.emit(SessionChanged(kind=SessionChangeKind.SIGNED_IN, session=session))
        return response

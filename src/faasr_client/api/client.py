import json
from typing import Optional, Type, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import BaseModel, ValidationError

from ..application.error_mapping import ApiMessages, api_error_from_response
from ..config import ClientConfig
from ..domain.errors import ApiError, DecodeError, NetworkError
from ..domain.models import (
    HealthResponse,
    InstallationResponse,
    SessionResponse,
    SuccessResponse,
    UploadResponse,
    WorkflowStatusResponse,
)

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)


class RemoteApiClient:
    """
    HTTP client for the workflow API (auth, workflows, health).

    Credentials travel in the session cookie, which the underlying
    httpx.AsyncClient keeps in its cookie jar between calls.
    """

    def __init__(
        self,
        base_url: str,
        timeout_sec: float = 30.0,
        config: Optional[ClientConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config or ClientConfig()
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout_sec,
            transport=transport,
            follow_redirects=False,
        )
        if self._config.SESSION_TOKEN:
            self._client.cookies.set(
                self._config.SESSION_COOKIE_NAME,
                self._config.SESSION_TOKEN,
                domain=self._client.base_url.host,
            )

    async def __aenter__(self) -> "RemoteApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def session_token(self) -> Optional[str]:
        """Current value of the session cookie, if the server has set one."""
        return self._client.cookies.get(self._config.SESSION_COOKIE_NAME)

    # Auth

    async def install(self) -> str:
        """
        Start the GitHub App installation.

        Returns:
            str: The installation URL from the 302 `Location` header.

        Raises:
            ApiError: If the server does not answer with a redirect carrying a location.
        """
        response = await self._send("GET", "/auth/install")
        location = response.headers.get("location")
        if response.status_code != 302 or not location:
            logger.warning("install_redirect_missing", status=response.status_code)
            raise ApiError(
                http_status=response.status_code,
                user_message=ApiMessages.ERR_INSTALL_FAILED,
            )
        logger.info("install_redirect_received")
        return location

    async def callback(self, installation_id: str, setup_action: Optional[str] = None) -> InstallationResponse:
        """Exchange an installation id for a session after GitHub redirects back."""
        params = {"installation_id": installation_id}
        if setup_action:
            params["setup_action"] = setup_action
        response = await self._send("GET", "/auth/callback", params=params)
        return self._parse(response, InstallationResponse)

    async def get_session(self) -> SessionResponse:
        response = await self._send("GET", "/auth/session")
        return self._parse(response, SessionResponse)

    async def logout(self) -> SuccessResponse:
        response = await self._send("POST", "/auth/logout")
        result = self._parse(response, SuccessResponse)
        # Server expires the cookie too; drop it locally in case the jar kept it
        self._client.cookies.delete(self._config.SESSION_COOKIE_NAME)
        return result

    # Workflows

    async def upload(self, file_name: str, raw_bytes: bytes) -> UploadResponse:
        """
        Upload a workflow file as multipart form data.
        The multipart boundary and request content type are set by httpx.
        """
        files = {
            self._config.UPLOAD_FIELD_NAME: (file_name, raw_bytes, self._config.UPLOAD_CONTENT_TYPE),
        }
        logger.info("workflow_upload_started", file_name=file_name, size_bytes=len(raw_bytes))
        response = await self._send("POST", "/workflows/upload", files=files)
        result = self._parse(response, UploadResponse)
        logger.info("workflow_upload_completed", file_name=file_name, commit_sha=result.commit_sha)
        return result

    async def get_status(self, file_name: str) -> WorkflowStatusResponse:
        # Same escaping as encodeURIComponent
        path = "/workflows/status/" + quote(file_name, safe="!*'()")
        response = await self._send("GET", path)
        return self._parse(response, WorkflowStatusResponse)

    # Health

    async def health(self) -> HealthResponse:
        response = await self._send("GET", "/health")
        return self._parse(response, HealthResponse)

    # Internals

    async def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            logger.error("api_request_failed", method=method, path=path, error=str(e))
            raise NetworkError(ApiMessages.ERR_NETWORK) from e

    @staticmethod
    def _parse(response: httpx.Response, model: Type[ModelT]) -> ModelT:
        """
        Raise ApiError for non-2xx, DecodeError for an unreadable 2xx body,
        otherwise validate the body into `model`.
        """
        if not response.is_success:
            error = api_error_from_response(response.status_code, response.content)
            logger.warning(
                "api_error_response",
                path=response.request.url.path,
                status=response.status_code,
                error=error.user_message,
            )
            raise error

        try:
            return model.model_validate(json.loads(response.content))
        except (ValueError, ValidationError) as e:
            logger.error("api_response_invalid", path=response.request.url.path, error=str(e))
            raise DecodeError(ApiMessages.ERR_INVALID_RESPONSE) from e

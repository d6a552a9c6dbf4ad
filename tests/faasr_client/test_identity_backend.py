from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import jwt
import pytest

from src.faasr_client.domain.errors import ApiError, IdentityBackendError
from src.faasr_client.domain.events import SessionChangeKind
from src.faasr_client.domain.models import InstallationResponse, SessionResponse, SuccessResponse
from src.faasr_client.infrastructure.identity_backend import ApiIdentityBackend, session_from_token

IAT = 1_704_067_200  # 2024-01-01T00:00:00Z
EXP = IAT + 24 * 3600


def make_token(**overrides):
    claims = {
        "installationId": "12345",
        "userLogin": "octocat",
        "userId": 583231,
        "avatarUrl": "https://avatars.example/583231",
        "iat": IAT,
        "exp": EXP,
    }
    claims.update(overrides)
    return jwt.encode(claims, "server-secret", algorithm="HS256")


@pytest.fixture
def api():
    mock = MagicMock()
    mock.session_token = make_token()
    mock.get_session = AsyncMock(return_value=SessionResponse(authenticated=True))
    mock.logout = AsyncMock(return_value=SuccessResponse(success=True, message="Logged out"))
    mock.callback = AsyncMock()
    return mock

@pytest.fixture
def backend(api):
    return ApiIdentityBackend(api)


def test_session_from_token():
    token = make_token()

    session = session_from_token(token)

    assert session.installation_id == "12345"
    assert session.user_login == "octocat"
    assert session.user_id == 583231
    assert session.avatar_url == "https://avatars.example/583231"
    assert session.token == token
    assert session.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert (session.expires_at - session.created_at).total_seconds() == 24 * 3600

def test_session_from_token_without_avatar():
    claims = {"installationId": "1", "userLogin": "a", "userId": 2, "iat": IAT, "exp": EXP}
    session = session_from_token(jwt.encode(claims, "k", algorithm="HS256"))
    assert session.avatar_url is None

@pytest.mark.parametrize("token", ["not-a-jwt", jwt.encode({"userLogin": "x"}, "k", algorithm="HS256")])
def test_session_from_bad_token(token):
    with pytest.raises(IdentityBackendError):
        session_from_token(token)

@pytest.mark.asyncio
async def test_get_session_authenticated(backend):
    session = await backend.get_session()
    assert session.user_login == "octocat"

@pytest.mark.asyncio
async def test_get_session_unauthenticated(backend, api):
    api.get_session.return_value = SessionResponse(authenticated=False)
    assert await backend.get_session() is None

@pytest.mark.asyncio
async def test_get_session_without_cookie_fails(backend, api):
    api.session_token = None
    with pytest.raises(IdentityBackendError):
        await backend.get_session()

@pytest.mark.asyncio
async def test_refresh_emits_change(backend):
    events = []
    backend.subscribe(events.append)

    session = await backend.refresh_session()

    assert len(events) == 1
    assert events[0].kind == SessionChangeKind.TOKEN_REFRESHED
    assert events[0].session == session

@pytest.mark.asyncio
async def test_refresh_failure_emits_nothing(backend, api):
    events = []
    backend.subscribe(events.append)
    api.get_session.side_effect = ApiError(500, "Server error. Please try again later.")

    with pytest.raises(ApiError):
        await backend.refresh_session()

    assert events == []

@pytest.mark.asyncio
async def test_sign_out_emits_signed_out(backend, api):
    events = []
    subscription = backend.subscribe(events.append)

    await backend.sign_out()

    api.logout.assert_awaited_once()
    assert [(e.kind, e.session) for e in events] == [(SessionChangeKind.SIGNED_OUT, None)]

    subscription.unsubscribe()
    await backend.sign_out()
    assert len(events) == 1

@pytest.mark.asyncio
async def test_exchange_installation_signs_in(backend, api):
    api.callback.return_value = InstallationResponse.model_validate({
        "success": True,
        "message": "ok",
        "user": {"login": "octocat", "id": 583231},
        "fork": {"owner": "octocat", "repoName": "FaaSr-workflow", "url": "https://github.com/octocat/FaaSr-workflow", "status": "created"},
    })
    events = []
    backend.subscribe(events.append)

    response = await backend.exchange_installation("12345", "install")

    api.callback.assert_awaited_once_with("12345", "install")
    assert response.success
    assert events[0].kind == SessionChangeKind.SIGNED_IN
    assert events[0].session.installation_id == "12345"

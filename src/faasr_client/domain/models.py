from datetime import datetime
from enum import Enum
from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Base model for API payloads. camelCase on the wire, snake_case in Python."""
    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    def to_wire(self) -> dict:
        """Dump as the server would send it."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


class ForkStatus(str, Enum):
    PENDING = "pending"
    EXISTS = "exists"
    CREATED = "created"
    FAILED = "failed"


class RegistrationStatus(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCESS = "success"
    FAILED = "failed"


class Session(WireModel):
    """
    Authenticated GitHub App installation session.
    Built from the session token issued by the identity backend.
    """
    installation_id: str
    user_login: str
    user_id: int
    avatar_url: Optional[str] = None
    token: str = Field(..., repr=False)
    created_at: datetime
    expires_at: datetime


class UserInfo(WireModel):
    login: str
    id: int
    avatar_url: Optional[str] = None


class ForkInfo(WireModel):
    owner: str
    repo_name: str
    url: str
    status: ForkStatus


class SessionTokens(BaseModel):
    """Token pair returned by the installation callback. Keys are snake_case on the wire."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    access_token: str = Field(..., repr=False)
    refresh_token: str = Field(..., repr=False)


class InstallationResponse(WireModel):
    success: bool
    message: str
    user: UserInfo
    fork: ForkInfo
    session: Optional[SessionTokens] = None


class SessionResponse(WireModel):
    authenticated: bool
    user: Optional[UserInfo] = None
    fork: Optional[ForkInfo] = None


class SuccessResponse(WireModel):
    success: bool
    message: str


class UploadResponse(WireModel):
    success: bool
    message: str
    file_name: str
    commit_sha: str
    workflow_run_id: Optional[int] = None
    workflow_run_url: Optional[str] = None


class WorkflowStatusResponse(WireModel):
    file_name: str
    status: RegistrationStatus
    workflow_run_id: Optional[int] = None
    workflow_run_url: Optional[str] = None
    error_message: Optional[str] = None
    triggered_at: str
    completed_at: Optional[str] = None


class ErrorResponse(WireModel):
    success: bool = False
    error: Optional[str] = None
    details: Optional[Any] = None


class HealthResponse(WireModel):
    status: str
    timestamp: str
    version: str

from enum import Enum
from pathlib import Path
from functools import lru_cache
from urllib.parse import urlparse
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent.parent


#  Working modes
class AppEnvironment(str, Enum):
    """Working modes"""
    DEV = "development"
    PROD = "production"
    TEST = "testing"


#  Remote API config
class ApiConfig(BaseModel):
    """Remote API config"""
    base_url: str = Field(
        default="http://localhost:54321/functions/v1",
        description="Base URL of the workflow API (edge functions root)"
    )
    timeout_sec: float = Field(default=30.0, gt=0, description="HTTP request timeout")

    @field_validator("base_url")
    @classmethod
    def check_base_url(cls, v: str) -> str:
        """Base URL must be an absolute http(s) URL."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"API base URL must be an absolute http(s) URL, got: {v!r}")
        return v.rstrip("/")


#  Upload config
class UploadConfig(BaseModel):
    """Workflow upload config"""
    max_size_bytes: int = Field(default=1024 * 1024, gt=0, description="Maximum workflow file size")
    reset_delay_ms: int = Field(default=2000, ge=0, description="Delay before clearing a successful upload")


#  Notification config
class NotificationConfig(BaseModel):
    """Notification and navigation timings"""
    success_auto_dismiss_ms: int = Field(default=5000, ge=0, description="0 disables auto-dismiss")
    redirect_delay_ms: int = Field(default=2000, ge=0, description="Delay before leaving the install page")


#  Main Settings
class Settings(BaseSettings):
    """
    Main Settings class.
    Reads configuration from .env file or environment variables.
    """
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore"
    )

    env: AppEnvironment = Field(default=AppEnvironment.DEV, alias="APP_ENV")

    # Compose configs
    api: ApiConfig = Field(default_factory=ApiConfig)
    upload: UploadConfig = Field(default_factory=UploadConfig)
    notification: NotificationConfig = Field(default_factory=NotificationConfig)


@lru_cache
def get_settings() -> Settings:
    """
    Creates and returns a (cached) instance of settings.
    Used for Dependency Injection.
    """
    return Settings()

from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings
from src.config import get_settings, Settings

class ClientConfig(BaseSettings):
    """
    Configuration for the workflow API client.
    """
    SESSION_COOKIE_NAME: str = Field(default="faasr_session", description="Cookie carrying the session JWT")
    UPLOAD_FIELD_NAME: str = Field(default="file", description="Multipart field for workflow uploads")
    UPLOAD_CONTENT_TYPE: str = Field(default="application/json", description="Content type of the uploaded part")
    SESSION_TOKEN: Optional[str] = Field(default=None, description="Seed the session cookie, e.g. for headless runs")

    @property
    def global_settings(self) -> Settings:
        """
        Access to the global project settings.
        """
        return get_settings()

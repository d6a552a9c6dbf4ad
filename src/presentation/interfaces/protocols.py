from typing import Protocol, Optional

from src.faasr_client.domain.models import InstallationResponse

class IFileSource(Protocol):
    """
    A file the user picked, before its content has been read.
    """
    @property
    def name(self) -> str:
        """Base name of the file, as shown to the user."""
        ...

    @property
    def size(self) -> int:
        """Size in bytes, known without reading the content."""
        ...

    async def read_bytes(self) -> bytes:
        """
        Reads the whole content.

        Raises:
            OSError: If the content cannot be read.
        """
        ...

class IInstallApi(Protocol):
    """
    Interface for starting a GitHub App installation.
    Decouples the install flow from the concrete API client.
    """
    async def install(self) -> str:
        """Returns the URL the user must be redirected to."""
        ...

class IInstallationExchange(Protocol):
    """
    Interface for completing an installation once GitHub redirects back.
    """
    async def exchange_installation(
        self, installation_id: str, setup_action: Optional[str] = None
    ) -> InstallationResponse:
        """Completes the installation and establishes the session."""
        ...

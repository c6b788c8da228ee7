"""Remote browser provider interfaces following Black Box Design principles."""
from dataclasses import dataclass
from typing import Optional, Protocol


class ProviderError(Exception):
    """A provider call failed (network, quota, invalid project, timeout)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@dataclass
class SessionConfig:
    """Parameters for creating a remote browser session."""
    project_id: str
    viewport_width: int = 1280
    viewport_height: int = 800


@dataclass
class SessionHandle:
    """A remote browser session as returned by the provider."""
    session_id: str
    connect_url: str


@dataclass
class LiveViewInfo:
    """Embeddable debug/live-view information for a session."""
    debugger_url: str
    debugger_fullscreen_url: Optional[str] = None
    ws_url: Optional[str] = None


class BrowserProvider(Protocol):
    """Protocol for remote browser providers - allows swappable implementations."""

    async def create_session(self, config: SessionConfig) -> SessionHandle:
        """
        Allocate a remote browser.

        Raises:
            ProviderError: If the provider rejects or fails the request
        """
        ...

    async def get_live_view_info(self, session_id: str) -> LiveViewInfo:
        """
        Fetch the live-view URL for a session.

        Raises:
            ProviderError: If the session is unknown or the call fails
        """
        ...

    async def stop_session(self, session_id: str) -> None:
        """
        Release a remote browser.

        Raises:
            ProviderError: If the release request fails
        """
        ...

    async def aclose(self) -> None:
        """Release client resources."""
        ...

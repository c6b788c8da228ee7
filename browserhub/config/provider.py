"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol


DEFAULT_BROWSERBASE_API_URL = "https://api.browserbase.com"


@dataclass
class ProviderConfig:
    """Remote browser provider configuration."""
    api_key: Optional[str]
    project_id: Optional[str]
    api_url: str = DEFAULT_BROWSERBASE_API_URL
    viewport_width: int = 1280
    viewport_height: int = 800
    timeout: float = 30.0

    @property
    def is_configured(self) -> bool:
        """Check if provider credentials are present."""
        return bool(self.api_key) and bool(self.project_id)


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_provider_config(self) -> ProviderConfig:
        """Get remote browser provider configuration."""
        ...


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_provider_config(self) -> ProviderConfig:
        """Get Browserbase configuration from environment variables."""
        timeout = float(os.getenv("PROVIDER_TIMEOUT", "30"))
        if timeout <= 0:
            raise ValueError("PROVIDER_TIMEOUT must be a positive number of seconds")

        return ProviderConfig(
            api_key=os.getenv("BROWSERBASE_API_KEY") or None,
            project_id=os.getenv("BROWSERBASE_PROJECT_ID") or None,
            api_url=os.getenv("BROWSERBASE_API_URL", DEFAULT_BROWSERBASE_API_URL).rstrip("/"),
            viewport_width=int(os.getenv("VIEWPORT_WIDTH", "1280")),
            viewport_height=int(os.getenv("VIEWPORT_HEIGHT", "800")),
            timeout=timeout,
        )

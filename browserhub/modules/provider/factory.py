"""
Provider Factory following Black Box Design principles.

This factory:
- Decides whether the remote browser subsystem is enabled
- Builds the concrete provider client from configuration
- Returns None when credentials are absent (the "not configured" state)
"""

import logging
from typing import Optional

import httpx

from browserhub.config.provider import ProviderConfig

from .browserbase import BrowserbaseProvider
from .interfaces import BrowserProvider, SessionConfig

logger = logging.getLogger(__name__)


class ProviderFactory:
    """Composition root for the provider client."""

    @staticmethod
    def build(
        provider_config: ProviderConfig,
        client: Optional[httpx.AsyncClient] = None,
    ) -> Optional[BrowserProvider]:
        """
        Build the provider client.

        Args:
            provider_config: Provider configuration
            client: Optional httpx client override

        Returns:
            Provider client, or None when credentials are not configured
        """
        if not provider_config.is_configured:
            logger.warning("BrowserBase API key not configured - browser preview disabled")
            return None

        logger.info("BrowserBase client initialized")
        return BrowserbaseProvider(provider_config, client=client)

    @staticmethod
    def session_config(provider_config: ProviderConfig) -> SessionConfig:
        """Session parameters used for every create call."""
        return SessionConfig(
            project_id=provider_config.project_id or "",
            viewport_width=provider_config.viewport_width,
            viewport_height=provider_config.viewport_height,
        )

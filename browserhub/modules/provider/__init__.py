"""
Provider Module - Black Box Interface

Purpose: Allocate and release remote browser sessions
Interface: create_session(), get_live_view_info(), stop_session()
Hidden: Browserbase REST endpoints, HTTP client, response parsing

Replaceable with any hosted browser provider implementing BrowserProvider.
"""

from .browserbase import BrowserbaseProvider
from .factory import ProviderFactory
from .interfaces import (
    BrowserProvider,
    LiveViewInfo,
    ProviderError,
    SessionConfig,
    SessionHandle,
)

__all__ = [
    "BrowserProvider",
    "BrowserbaseProvider",
    "LiveViewInfo",
    "ProviderError",
    "ProviderFactory",
    "SessionConfig",
    "SessionHandle",
]

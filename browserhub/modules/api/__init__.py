"""
API Module - Black Box Interface

Purpose: Wire format of the browser control channel
Interface: ClientMessage, ServerMessage and event/state enums
Hidden: Field aliases, payload validation

The API module only describes messages - it contains no business logic.
"""

from .models import (
    BrowserErrorPayload,
    BrowserReadyPayload,
    ClientEvent,
    ClientMessage,
    ServerEvent,
    ServerMessage,
    SessionState,
    browser_error,
    browser_ready,
    navigation_complete,
)

__all__ = [
    "BrowserErrorPayload",
    "BrowserReadyPayload",
    "ClientEvent",
    "ClientMessage",
    "ServerEvent",
    "ServerMessage",
    "SessionState",
    "browser_error",
    "browser_ready",
    "navigation_complete",
]

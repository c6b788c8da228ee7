"""
browserhub wire models.

These models define the structure of all messages exchanged between
clients and the gateway, plus the lifecycle states reported by the API.
"""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# Enums


class SessionState(str, Enum):
    """Lifecycle state of a connection's remote browser."""

    IDLE = "idle"
    CREATING = "creating"
    READY = "ready"
    STOPPING = "stopping"


class ClientEvent(str, Enum):
    """Inbound control messages (client -> server)."""

    START_BROWSER = "start-browser"
    NAVIGATE = "navigate"
    STOP_BROWSER = "stop-browser"


class ServerEvent(str, Enum):
    """Outbound lifecycle events (server -> client)."""

    BROWSER_READY = "browser-ready"
    BROWSER_ERROR = "browser-error"
    NAVIGATION_COMPLETE = "navigation-complete"


# Inbound


class ClientMessage(BaseModel):
    """A control message received on the WebSocket."""

    event: ClientEvent = Field(..., description="Control message name")
    data: Optional[Any] = Field(None, description="Event payload (navigate target URL)")

    @model_validator(mode="after")
    def validate_navigate_target(self) -> "ClientMessage":
        """Navigate carries a non-empty address string; other events ignore payload."""
        if self.event == ClientEvent.NAVIGATE:
            if not isinstance(self.data, str) or not self.data.strip():
                raise ValueError("navigate requires a target address string")
            self.data = self.data.strip()
        return self


# Outbound payloads


class BrowserReadyPayload(BaseModel):
    """Payload of browser-ready."""

    model_config = ConfigDict(populate_by_name=True)

    session_id: str = Field(..., alias="sessionId")
    live_view_url: str = Field(..., alias="liveViewUrl")
    connect_url: str = Field(..., alias="connectUrl")


class BrowserErrorPayload(BaseModel):
    """Payload of browser-error."""

    message: str = Field(..., min_length=1)


class ServerMessage(BaseModel):
    """An event sent to exactly one connection."""

    event: ServerEvent
    data: Optional[Dict[str, Any]] = None

    def to_wire(self) -> Dict[str, Any]:
        return {"event": self.event.value, "data": self.data}


def browser_ready(session_id: str, live_view_url: str, connect_url: str) -> ServerMessage:
    payload = BrowserReadyPayload(
        session_id=session_id, live_view_url=live_view_url, connect_url=connect_url
    )
    return ServerMessage(event=ServerEvent.BROWSER_READY, data=payload.model_dump(by_alias=True))


def browser_error(message: str) -> ServerMessage:
    payload = BrowserErrorPayload(message=message or "Unknown browser error")
    return ServerMessage(event=ServerEvent.BROWSER_ERROR, data=payload.model_dump())


def navigation_complete() -> ServerMessage:
    return ServerMessage(event=ServerEvent.NAVIGATION_COMPLETE)

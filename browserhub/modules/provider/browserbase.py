"""
Browserbase provider client.

Thin async wrapper over the Browserbase REST API. Holds credentials and a
shared httpx client; no other local state. Every failure is surfaced as
ProviderError without interpreting provider error codes.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from browserhub.config.provider import ProviderConfig

from .interfaces import LiveViewInfo, ProviderError, SessionConfig, SessionHandle

logger = logging.getLogger("browserhub.provider")


class BrowserbaseProvider:
    """Browserbase implementation of the BrowserProvider protocol."""

    def __init__(self, config: ProviderConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize provider client.

        Args:
            config: Provider configuration (must be configured)
            client: Optional pre-built httpx client (tests inject a MockTransport here)
        """
        if not config.is_configured:
            raise ValueError("Browserbase API key and project ID are required")

        self.config = config
        self._client = client or httpx.AsyncClient(
            base_url=config.api_url,
            timeout=config.timeout,
        )
        self._headers = {
            "X-BB-API-Key": config.api_key,
            "Content-Type": "application/json",
        }

    async def create_session(self, config: SessionConfig) -> SessionHandle:
        payload = {
            "projectId": config.project_id,
            "browserSettings": {
                "viewport": {
                    "width": config.viewport_width,
                    "height": config.viewport_height,
                }
            },
        }
        data = await self._request("POST", "/v1/sessions", json=payload)

        session_id = data.get("id")
        connect_url = data.get("connectUrl")
        if not session_id or not connect_url:
            raise ProviderError("Browserbase returned an incomplete session")

        return SessionHandle(session_id=session_id, connect_url=connect_url)

    async def get_live_view_info(self, session_id: str) -> LiveViewInfo:
        data = await self._request("GET", f"/v1/sessions/{session_id}/debug")

        debugger_url = data.get("debuggerUrl")
        if not debugger_url:
            raise ProviderError(f"Browserbase returned no live view URL for {session_id}")

        return LiveViewInfo(
            debugger_url=debugger_url,
            debugger_fullscreen_url=data.get("debuggerFullscreenUrl"),
            ws_url=data.get("wsUrl"),
        )

    async def stop_session(self, session_id: str) -> None:
        await self._request(
            "POST",
            f"/v1/sessions/{session_id}",
            json={"projectId": self.config.project_id, "status": "REQUEST_RELEASE"},
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        try:
            response = await self._client.request(method, path, json=json, headers=self._headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            raise ProviderError(
                f"Browserbase {method} {path} failed with status {status}: {_error_detail(e.response)}",
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            raise ProviderError(f"Browserbase {method} {path} failed: {str(e) or type(e).__name__}") from e

        if not response.content:
            return {}

        try:
            data = response.json()
        except ValueError as e:
            raise ProviderError(f"Browserbase {method} {path} returned invalid JSON") from e

        if not isinstance(data, dict):
            raise ProviderError(f"Browserbase {method} {path} returned unexpected payload")
        return data


def _error_detail(response: httpx.Response) -> str:
    """Best-effort extraction of the provider's error message."""
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("message") or body.get("error") or body)
    return str(body)

"""
HTTP client used by every screen to reach the backend REST API.

One `ApiClient` is constructed by the composition root and passed to each
screen. It attaches credentials, decodes bodies and maps failures onto the
exceptions in `backoffice.app.core.exceptions`.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import httpx

from backoffice.app.core.config import Settings
from backoffice.app.core.exceptions import (
    AuthenticationError,
    BackendError,
    ResourceNotFoundError,
    TransportError,
)
from backoffice.app.core.observability import EVENT_HOOKS

logger = logging.getLogger("backoffice.http")


@dataclass
class AuthSession:
    """Credentials the admin is currently using."""
    token: Optional[str] = None
    active_role_id: Optional[str] = None

    def headers(self) -> Dict[str, str]:
        headers = {}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        if self.active_role_id:
            headers["X-Active-Role"] = self.active_role_id
        return headers

    def clear(self) -> None:
        self.token = None
        self.active_role_id = None


@dataclass
class ApiResponse:
    """Decoded response: `data` is parsed JSON, text, or raw bytes for downloads."""
    data: Any
    headers: Dict[str, str] = field(default_factory=dict)
    status: int = 200

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")


def decode_body(response: httpx.Response) -> Any:
    """Best effort JSON decode, falling back to text."""
    if not response.content:
        return None
    try:
        return response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        return response.text


class ApiClient:
    """Thin async wrapper around `httpx.AsyncClient`."""

    def __init__(
        self,
        base_url: str,
        session: Optional[AuthSession] = None,
        timeout: float = 20.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.session = session or AuthSession()
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Accept": "application/json"},
            event_hooks=EVENT_HOOKS,
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "ApiClient":
        session = AuthSession(token=settings.admin_token, active_role_id=settings.active_role_id)
        return cls(settings.api_base_url, session=session, timeout=settings.request_timeout, transport=transport)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None, as_bytes: bool = False) -> ApiResponse:
        return await self._request("GET", path, params=params, as_bytes=as_bytes)

    async def post(self, path: str, json: Any = None, data: Optional[Dict[str, Any]] = None, files: Any = None) -> ApiResponse:
        return await self._request("POST", path, json=json, data=data, files=files)

    async def put(self, path: str, json: Any = None, data: Optional[Dict[str, Any]] = None, files: Any = None) -> ApiResponse:
        return await self._request("PUT", path, json=json, data=data, files=files)

    async def patch(self, path: str, json: Any = None) -> ApiResponse:
        return await self._request("PATCH", path, json=json)

    async def delete(self, path: str) -> ApiResponse:
        return await self._request("DELETE", path)

    async def _request(self, method: str, path: str, as_bytes: bool = False, **kwargs) -> ApiResponse:
        kwargs = {key: value for key, value in kwargs.items() if value is not None}
        try:
            response = await self._client.request(method, path, headers=self.session.headers(), **kwargs)
        except httpx.RequestError as exc:
            logger.error("No response for %s %s: %s", method, path, exc)
            raise TransportError(details={"method": method, "path": path, "reason": str(exc)}) from exc

        headers = {key.lower(): value for key, value in response.headers.items()}

        if response.status_code >= 400:
            data = decode_body(response)
            if response.status_code == 401:
                # Stored credentials are no longer valid
                self.session.clear()
                raise AuthenticationError(data)
            if response.status_code == 404:
                raise ResourceNotFoundError(data)
            raise BackendError(response.status_code, data)

        data = response.content if as_bytes else decode_body(response)
        return ApiResponse(data=data, headers=headers, status=response.status_code)

"""
Centralized Test Configuration.

Screens talk to a fake backend: a small FastAPI app served to the real
`ApiClient` through `httpx.ASGITransport`. Tests script its replies per
method and path and inspect the requests it recorded.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple
from urllib.parse import parse_qs

import pytest
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, Response
from httpx import ASGITransport

from backoffice.app.core.http_client import ApiClient, AuthSession
from backoffice.app.services.notification_service import NotificationCenter
from backoffice.app.services.platform import LocalPlatform

BASE_URL = "http://test/api"


@dataclass
class Reply:
    status: int = 200
    json: Any = None
    content: bytes = b""
    media_type: str = "application/json"


@dataclass
class RecordedRequest:
    method: str
    path: str
    params: Dict[str, str]
    content_type: str
    body: bytes
    headers: Dict[str, str] = field(default_factory=dict)

    def json(self) -> Any:
        return json.loads(self.body)

    def form(self) -> Dict[str, str]:
        return {k: v[0] for k, v in parse_qs(self.body.decode()).items()}


class FakeBackend:
    """
    Scripted REST backend.

    `on(method, path, *replies)` queues replies; each request consumes one
    and the last one keeps answering. Unscripted routes answer 404.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], List[Reply]] = {}
        self.requests: List[RecordedRequest] = []
        self.app = FastAPI()
        self.app.add_api_route(
            "/api/{path:path}",
            self._handle,
            methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
        )

    def on(self, method: str, path: str, *replies: Any) -> None:
        self.routes[(method, path)] = [r if isinstance(r, Reply) else Reply(json=r) for r in replies]

    def calls(self, method: str = None, path: str = None) -> List[RecordedRequest]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or r.path == path)
        ]

    async def _handle(self, request: Request, path: str):
        path = "/" + path
        self.requests.append(RecordedRequest(
            method=request.method,
            path=path,
            params=dict(request.query_params),
            content_type=request.headers.get("content-type", ""),
            body=await request.body(),
            headers=dict(request.headers),
        ))

        replies = self.routes.get((request.method, path))
        if not replies:
            return JSONResponse({"success": False, "message": "Route not found"}, status_code=404)
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if reply.content:
            return Response(content=reply.content, status_code=reply.status, media_type=reply.media_type)
        return JSONResponse(reply.json, status_code=reply.status)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
async def client(backend):
    """ApiClient wired to the fake backend."""
    session = AuthSession(token="test-token", active_role_id="role-admin")
    async with ApiClient(BASE_URL, session=session, transport=ASGITransport(app=backend.app)) as api:
        yield api


@pytest.fixture
def notifier():
    return NotificationCenter()


@pytest.fixture
def platform(tmp_path):
    return LocalPlatform(tmp_path / "downloads", confirm_handler=lambda prompt: True)

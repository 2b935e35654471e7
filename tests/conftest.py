"""Shared fixtures: a fake upstream for GitHub/ClickUp and a wired test application."""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from credentials import ClickUpCredential, CredentialBundle, CredentialStore, Workspace
from gateway import create_app
from oauth import OAuthClientConfig
from providers import ProviderClients

RouteValue = Union[httpx.Response, Callable[[httpx.Request], httpx.Response]]


class FakeUpstream:
    """Routes outbound httpx requests by (method, scheme://host/path)

    Unrouted requests get a 404 so a missing stub shows up as an
    UpstreamError instead of a real network call.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str], RouteValue] = {}
        self.calls: List[httpx.Request] = []

    def add(self, method: str, url: str, response: RouteValue) -> None:
        self.routes[(method.upper(), url)] = response

    def json(self, method: str, url: str, payload: Any, status_code: int = 200) -> None:
        self.add(method, url, httpx.Response(status_code, json=payload))

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        key = (request.method, f"{request.url.scheme}://{request.url.host}{request.url.path}")
        route = self.routes.get(key)
        if route is None:
            return httpx.Response(404, json={"message": f"no stub for {key}"})
        if callable(route):
            return route(request)
        return route

    def calls_to(self, url_fragment: str) -> List[httpx.Request]:
        return [call for call in self.calls if url_fragment in str(call.url)]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)


def run(coro):
    """Run a coroutine from a synchronous test"""
    return asyncio.run(coro)


def ready_clickup(workspace_id: Optional[str] = "w1") -> ClickUpCredential:
    return ClickUpCredential(
        access_token="cu-token",
        selected_workspace_id=workspace_id,
        workspaces=(Workspace(id="w1", name="Engineering"), Workspace(id="w2", name="Marketing")),
    )


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def store() -> CredentialStore:
    return CredentialStore(pending_ttl=600.0)


@pytest.fixture
def oauth_config() -> OAuthClientConfig:
    return OAuthClientConfig(
        github_client_id="gh-client",
        github_client_secret="gh-secret",
        clickup_client_id="cu-client",
        clickup_client_secret="cu-secret",
        github_callback_url="https://gateway.test/github/callback",
        clickup_callback_url="https://gateway.test/clickup/callback",
        frontend_url="http://localhost:5173",
    )


@pytest.fixture
def app(store, oauth_config, upstream):
    return create_app(
        store=store,
        oauth_config=oauth_config,
        providers=ProviderClients(transport=upstream.transport),
        sweep_interval=0,
    )


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


INITIALIZE = {
    "jsonrpc": "2.0",
    "id": 1,
    "method": "initialize",
    "params": {
        "protocolVersion": "2025-03-26",
        "capabilities": {},
        "clientInfo": {"name": "pytest", "version": "1.0"},
    },
}


def open_session(client: TestClient) -> str:
    """Initialize an MCP session and return its id"""
    response = client.post("/mcp", json=INITIALIZE)
    assert response.status_code == 200
    return response.headers["mcp-session-id"]


def call_tool(client: TestClient, session_id: str, name: str, arguments: Optional[dict] = None, request_id: int = 7) -> dict:
    response = client.post(
        "/mcp",
        json={
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "tools/call",
            "params": {"name": name, "arguments": arguments or {}},
        },
        headers={"mcp-session-id": session_id},
    )
    assert response.status_code == 200
    return response.json()


def tool_text(payload: dict) -> str:
    return payload["result"]["content"][0]["text"]


def give_session(store: CredentialStore, session_id: str, bundle: CredentialBundle) -> None:
    """Attach credentials to a session through the claim protocol"""
    code = f"code-for-{session_id}"
    run(store.store_pending(code, bundle))
    assert run(store.claim(code, session_id)) is not None

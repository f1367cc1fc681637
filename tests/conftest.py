"""
Shared fixtures for PayPal MCP server tests.

PayPal is replaced by an in-process fake served through httpx.MockTransport,
so no test makes a real network call.
"""

import asyncio
import json
from typing import Any, Dict, List, Optional, Tuple

import httpx
import pytest

from paypal_mcp.auth import PayPalTokenProvider
from paypal_mcp.domain_registry import MCPDomainRegistry
from paypal_mcp.domains.payments import PayPalClient, PayPalProvider
from paypal_mcp.protocol import MCPProtocolHandler

API_BASE = "https://api-m.sandbox.paypal.test"
ACCESS_TOKEN = "A21AAtest-token"


class FakePayPal:
    """Route table standing in for the PayPal REST API"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.routes: Dict[Tuple[str, str], Any] = {}
        self.add("POST", "/v1/oauth2/token", json_body={"access_token": ACCESS_TOKEN, "token_type": "Bearer"})

    def add(self, method: str, path: str, status: int = 200, json_body: Any = None,
            error: Optional[Exception] = None):
        self.routes[(method, path)] = (status, json_body, error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"name": "RESOURCE_NOT_FOUND", "message": "Route not faked"})
        status, body, error = route
        if error is not None:
            raise error
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def requests_to(self, path: str) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    @property
    def token_requests(self) -> List[httpx.Request]:
        return self.requests_to("/v1/oauth2/token")

    @property
    def api_requests(self) -> List[httpx.Request]:
        return [r for r in self.requests if r.url.path != "/v1/oauth2/token"]


def request_json(request: httpx.Request) -> Any:
    return json.loads(request.content)


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def fake_paypal():
    return FakePayPal()


@pytest.fixture
def token_provider(fake_paypal):
    return PayPalTokenProvider("client-id", "client-secret", API_BASE, transport=fake_paypal.transport)


@pytest.fixture
def registry(fake_paypal, token_provider):
    client = PayPalClient(API_BASE, transport=fake_paypal.transport)
    return MCPDomainRegistry({"payments": [PayPalProvider(client, token_provider)]})


@pytest.fixture
def protocol_handler(registry):
    return MCPProtocolHandler(registry)


@pytest.fixture
def call_tool(protocol_handler):
    """Send a tools/call request and return the JSON-RPC response"""
    missing = object()

    def _call(name: str, arguments: Any = missing, request_id: int = 1) -> Dict[str, Any]:
        params: Dict[str, Any] = {"name": name}
        if arguments is not missing:
            params["arguments"] = arguments
        message = {"jsonrpc": "2.0", "id": request_id, "method": "tools/call", "params": params}
        return run(protocol_handler.handle_message(message))

    return _call


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run without PayPal env vars or a stray .env file"""
    for key in ("PAYPAL_CLIENT_ID", "PAYPAL_CLIENT_SECRET", "PAYPAL_API_BASE", "PAYPAL_LOG_LEVEL"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch

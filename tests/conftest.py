"""Pytest configuration and shared fixtures"""

import json
import os
from contextlib import contextmanager
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from mercadopago_mcp.auth import AuthProvider, TokenStore
from mercadopago_mcp.client import MercadoPagoClient
from mercadopago_mcp.config import Config
from mercadopago_mcp.dispatcher import ToolDispatcher
from mercadopago_mcp.models import RequestContext
from mercadopago_mcp.tools import Tools

ENV_VARS = ("CLIENT_ID", "CLIENT_SECRET", "DEBUG")


class FakeMercadoPago:
    """Scripted stand-in for the identity and API hosts.

    Responses are queued per URL path as (status, json) pairs; the last
    queued response repeats.
    Every request is recorded for later assertions.
    """

    def __init__(self):
        self.routes: dict[str, list[tuple[int, object]]] = {}
        self.requests: list[httpx.Request] = []
        self.token_counter = 0

    def queue(self, path: str, *responses: tuple[int, object]) -> None:
        self.routes.setdefault(path, []).extend(responses)

    def requests_to(self, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path == path]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/oauth/token" and "/oauth/token" not in self.routes:
            self.token_counter += 1
            return httpx.Response(
                200,
                json={
                    "access_token": f"token-{self.token_counter}",
                    "token_type": "bearer",
                    "expires_in": 21600,
                    "scope": "offline_access",
                },
            )
        queued = self.routes.get(request.url.path)
        if not queued:
            return httpx.Response(404, json={"message": "not_found"})
        status, payload = queued.pop(0) if len(queued) > 1 else queued[0]
        return httpx.Response(status, json=payload)

    def http_client(self, config: Config) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=config.developers_url, transport=httpx.MockTransport(self.handler)
        )


def bearer_of(request: httpx.Request) -> str:
    return request.headers["Authorization"].removeprefix("Bearer ")


def body_of(request: httpx.Request) -> dict:
    return json.loads(request.content)


def _is_config_var(key: str) -> bool:
    key = key.upper()
    return key in ENV_VARS or key.startswith("MERCADOPAGO_MCP_")


@contextmanager
def isolated_env():
    """Temporarily clear CLIENT_ID/CLIENT_SECRET/DEBUG and MERCADOPAGO_MCP_*
    environment variables, dropping any set inside the block on exit.
    """
    saved = {key: value for key, value in os.environ.items() if _is_config_var(key)}
    for key in saved:
        os.environ.pop(key, None)

    try:
        yield
    finally:
        for key in [k for k in os.environ if _is_config_var(k)]:
            os.environ.pop(key, None)
        os.environ.update(saved)


@pytest.fixture
def clean_env():
    with isolated_env():
        yield


@pytest.fixture
def config(clean_env):
    """Config with test credentials and no environment interference"""
    return Config(client_id="test-client-id", client_secret="test-client-secret")


@pytest.fixture
def fake_api():
    return FakeMercadoPago()


@pytest.fixture
async def http_client(fake_api, config):
    async with fake_api.http_client(config) as client:
        yield client


@pytest.fixture
def token_store(config, http_client):
    return TokenStore(AuthProvider(config, http_client), config.credentials)


@pytest.fixture
def client(config, http_client, token_store):
    """MercadoPagoClient wired to the fake API"""
    return MercadoPagoClient(config, token_source=token_store, http_client=http_client)


@pytest.fixture
def tools(client, config):
    return Tools(client, config)


@pytest.fixture
def dispatcher(tools):
    return ToolDispatcher(tools)


@pytest.fixture
def context():
    return RequestContext(tool_name="test_tool", request_id="req_test")


@pytest.fixture
def mock_client(config):
    """MercadoPagoClient with mocked token source and JSON methods"""
    mock_token_source = Mock()
    mock_token_source.acquire = AsyncMock(return_value="mock_token")

    client = MercadoPagoClient(
        config=config,
        token_source=mock_token_source,
        http_client=Mock(spec=httpx.AsyncClient),
    )
    client.get_json = AsyncMock()
    client.post_json = AsyncMock()
    return client

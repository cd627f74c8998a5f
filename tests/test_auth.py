"""Tests for AuthProvider and TokenStore"""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, Mock

import httpx
import pytest

from mercadopago_mcp.auth import AuthProvider, TokenStore
from mercadopago_mcp.exceptions import AuthError
from mercadopago_mcp.models import CachedToken, Credentials

from .conftest import body_of

FIXED_NOW = datetime(2026, 1, 2, 3, 4, 5, tzinfo=UTC)


class TestAuthProvider:
    """Test the client-credentials exchange"""

    @pytest.fixture
    def provider(self, config, http_client):
        return AuthProvider(config, http_client, clock=lambda: FIXED_NOW)

    @pytest.mark.asyncio
    async def test_exchange_success(self, provider, config, fake_api):
        """Test that the grant is posted as JSON and the token returned"""
        token = await provider.exchange(config.credentials)

        assert token == CachedToken(
            value="token-1", obtained_at=FIXED_NOW, expires_in=21600
        )
        [request] = fake_api.requests
        assert str(request.url) == "https://api.mercadolibre.com/oauth/token"
        assert request.method == "POST"
        assert body_of(request) == {
            "grant_type": "client_credentials",
            "client_id": "test-client-id",
            "client_secret": "test-client-secret",
        }
        assert request.headers["Content-Type"] == "application/json"
        assert request.headers["Accept"] == "application/json"
        assert "Authorization" not in request.headers

    @pytest.mark.asyncio
    async def test_exchange_http_error(self, provider, config, fake_api):
        """Test that a non-2xx answer becomes AuthError"""
        fake_api.queue("/oauth/token", (400, {"message": "invalid client_id"}))

        with pytest.raises(AuthError) as exc_info:
            await provider.exchange(config.credentials)

        assert exc_info.value.message.startswith("MercadoPago Auth error: ")
        assert exc_info.value.context["status_code"] == 400
        assert isinstance(exc_info.value.__cause__, httpx.HTTPStatusError)

    @pytest.mark.asyncio
    async def test_exchange_network_error(self, config):
        """Test that transport failures become AuthError"""
        http_client = Mock(spec=httpx.AsyncClient)
        http_client.post = AsyncMock(side_effect=httpx.ConnectError("Connection failed"))
        provider = AuthProvider(config, http_client)

        with pytest.raises(AuthError) as exc_info:
            await provider.exchange(config.credentials)

        assert exc_info.value.message == "MercadoPago Auth error: Connection failed"

    @pytest.mark.asyncio
    async def test_exchange_missing_access_token(self, provider, config, fake_api):
        """Test that a payload without access_token becomes AuthError"""
        fake_api.queue("/oauth/token", (200, {"expires_in": 21600}))

        with pytest.raises(AuthError) as exc_info:
            await provider.exchange(config.credentials)

        assert "access_token" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_exchange_never_logs_secrets(self, provider, config, caplog):
        """Test that neither the token nor the secret is logged"""
        caplog.set_level("DEBUG", logger="mercadopago-mcp")

        await provider.exchange(config.credentials)

        assert "expires_in=21600" in caplog.text
        assert "token-1" not in caplog.text
        assert "test-client-secret" not in caplog.text


class TestTokenStore:
    """Test token caching"""

    @pytest.fixture
    def provider(self):
        provider = Mock(spec=AuthProvider)
        tokens = iter(["first", "second", "third"])
        provider.exchange = AsyncMock(
            side_effect=lambda credentials: CachedToken(
                value=next(tokens), obtained_at=FIXED_NOW
            )
        )
        return provider

    @pytest.fixture
    def store(self, provider):
        return TokenStore(provider, Credentials("id", "secret"))

    @pytest.mark.asyncio
    async def test_acquire_caches_token(self, store, provider):
        """Test that repeated acquires reuse the cached token"""
        assert store.cached is None

        assert await store.acquire() == "first"
        assert await store.acquire() == "first"

        provider.exchange.assert_awaited_once_with(Credentials("id", "secret"))
        assert store.cached.obtained_at == FIXED_NOW

    @pytest.mark.asyncio
    async def test_clear_forces_new_exchange(self, store, provider):
        """Test that clear discards the token and the next acquire re-exchanges"""
        await store.acquire()
        store.clear()

        assert store.cached is None
        assert await store.acquire() == "second"
        assert provider.exchange.await_count == 2

    def test_clear_is_idempotent(self, store):
        """Test that clearing an empty store is a no-op"""
        store.clear()
        store.clear()
        assert store.cached is None

    @pytest.mark.asyncio
    async def test_failed_exchange_leaves_store_empty(self, provider):
        """Test that an AuthError propagates and nothing is cached"""
        provider.exchange = AsyncMock(side_effect=AuthError("MercadoPago Auth error: x"))
        store = TokenStore(provider, Credentials("id", "secret"))

        with pytest.raises(AuthError):
            await store.acquire()
        assert store.cached is None

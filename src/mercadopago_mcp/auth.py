"""Authentication: OAuth client-credentials exchange and token cache."""

import logging
from collections.abc import Callable
from datetime import UTC, datetime

import httpx

from .config import Config
from .exceptions import AuthError
from .models import CachedToken, Credentials

logger = logging.getLogger("mercadopago-mcp.auth")


class AuthProvider:
    """Client-credentials grant against the identity endpoint.

    Responsibilities:
    - Exchange credentials for a bearer token
    - Map transport and payload failures to AuthError
    """

    def __init__(
        self,
        config: Config,
        http_client: httpx.AsyncClient,
        clock: Callable[[], datetime] | None = None,
    ):
        """Initialize AuthProvider.

        Args:
            config: Config instance with the token endpoint.
            http_client: HTTP client (for token requests only, no bearer header).
            clock: Returns the current time. Defaults to UTC wall clock.
        """
        self.config = config
        self.http_client = http_client
        self.clock = clock or (lambda: datetime.now(UTC))

    async def exchange(self, credentials: Credentials) -> CachedToken:
        """Request a new access token.

        Returns:
            Freshly obtained token.

        Raises:
            AuthError: On network failure, non-2xx status or a response
                without ``access_token``.
        """
        logger.debug("Requesting OAuth token")

        try:
            response = await self.http_client.post(
                self.config.auth_url,
                json={
                    "grant_type": "client_credentials",
                    "client_id": credentials.client_id,
                    "client_secret": credentials.client_secret,
                },
                headers={
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                },
            )
            response.raise_for_status()
            token_data = response.json()
            token = CachedToken(
                value=token_data["access_token"],
                obtained_at=self.clock(),
                expires_in=token_data.get("expires_in"),
            )
        except httpx.HTTPStatusError as e:
            logger.error(
                f"Failed to obtain OAuth token: status={e.response.status_code} {e}"
            )
            raise AuthError(
                f"MercadoPago Auth error: {e}",
                errors=[e.response.text],
                suggestions=["Verify CLIENT_ID and CLIENT_SECRET"],
                context={
                    "auth_url": self.config.auth_url,
                    "status_code": e.response.status_code,
                },
            ) from e
        except httpx.RequestError as e:
            logger.error(f"Failed to obtain OAuth token: {e!r}")
            raise AuthError(
                f"MercadoPago Auth error: {e}",
                suggestions=["Try again - this may be a temporary network issue"],
                context={"auth_url": self.config.auth_url},
            ) from e
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Missing access_token in response")
            raise AuthError(
                "MercadoPago Auth error: response without access_token",
                errors=[f"Malformed token payload: {e!r}"],
                suggestions=["This may indicate an auth server bug or API change"],
                context={"auth_url": self.config.auth_url},
            ) from e

        logger.debug(f"OAuth token obtained: expires_in={token.expires_in}")
        return token


class TokenStore:
    """Holds at most one cached bearer token.

    There is no expiry-based eviction: a stale token is discovered when the
    API answers 401, after which the request pipeline calls ``clear()``.
    Not locked; concurrent refreshes after a 401 may each run an exchange.
    """

    def __init__(self, auth_provider: AuthProvider, credentials: Credentials):
        self.auth_provider = auth_provider
        self.credentials = credentials
        self._token: CachedToken | None = None

    @property
    def cached(self) -> CachedToken | None:
        return self._token

    async def acquire(self) -> str:
        """Return the cached token, exchanging credentials on a miss.

        Raises:
            AuthError: From the exchange.
        """
        if self._token is None:
            self._token = await self.auth_provider.exchange(self.credentials)
        return self._token.value

    def clear(self) -> None:
        if self._token is not None:
            logger.debug("Clearing cached token")
        self._token = None

"""Mercado Pago client: authenticated request pipeline."""

import logging
from typing import Any

import httpx

from .auth import AuthProvider, TokenStore
from .config import Config, get_config
from .consts import USER_AGENT
from .protocols import TokenSource

logger = logging.getLogger("mercadopago-mcp.client")

# Attempts beyond the first; only a 401 earns a retry
MAX_AUTH_RETRIES = 1


class MercadoPagoClient:
    """Mercado Pago API client with authentication.

    Every outbound call runs through three stages in a fixed order:

    1. auth injection: acquire the bearer token and set the header
    2. request logging: method, url, params and body (never headers)
    3. response handling: log the outcome; on 401 clear the token and
       re-issue the call once, otherwise propagate the httpx error

    The retry budget is the ``attempt`` argument of each invocation, so
    concurrent calls never share retry state.
    """

    def __init__(
        self,
        config: Config | None = None,
        token_source: TokenSource | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """Initialize MercadoPagoClient.

        Args:
            config: Config instance. If None, uses get_config().
            token_source: Bearer token source. If None, creates a TokenStore
                backed by an AuthProvider.
            http_client: HTTP client. If None, creates a new one.
        """
        self.config = config or get_config()

        self._owns_http_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(
            base_url=self.config.developers_url,
            headers={
                "User-Agent": USER_AGENT,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
            timeout=self.config.timeout_seconds,
        )

        self.token_source = token_source or TokenStore(
            AuthProvider(self.config, self.http_client), self.config.credentials
        )

        logger.info(f"Mercado Pago client created for {self.config.api_base_url}")

    async def __aenter__(self) -> "MercadoPagoClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_http_client:
            await self.http_client.aclose()

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
        attempt: int = 0,
    ) -> httpx.Response:
        """Issue an authenticated request.

        Args:
            method: HTTP method.
            url: Absolute URL, or a path relative to the developers API base.
            params: Query parameters.
            json: JSON body.
            attempt: Retries already spent on this call.

        Returns:
            The successful response.

        Raises:
            AuthError: If a token cannot be obtained.
            httpx.HTTPStatusError: For HTTP 4xx/5xx responses, including a
                401 on the retried call.
            httpx.RequestError: For network errors, timeouts, DNS failures.
        """
        headers = await self._inject_auth({})
        self._log_request(method, url, params, json)

        try:
            response = await self.http_client.request(
                method, url, params=params, json=json, headers=headers
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._log_error(method, url, e)
            if _status_of(e) == 401 and attempt < MAX_AUTH_RETRIES:
                logger.debug("Auth token expired, retrying request")
                self.token_source.clear()
                return await self.request(
                    method, url, params=params, json=json, attempt=attempt + 1
                )
            raise

        logger.debug(
            f"API Response: status={response.status_code} url={response.url} "
            f"data={_body_of(response)}"
        )
        return response

    async def get_json(self, url: str, **kwargs) -> Any:
        """Get JSON from URL with authentication.

        Raises:
            Same as request().
        """
        response = await self.request("GET", url, **kwargs)
        return response.json()

    async def post_json(self, url: str, **kwargs) -> Any:
        """Post JSON to URL with authentication.

        Raises:
            Same as request().
        """
        response = await self.request("POST", url, **kwargs)
        return response.json()

    async def _inject_auth(self, headers: dict[str, str]) -> dict[str, str]:
        token = await self.token_source.acquire()
        headers["Authorization"] = f"Bearer {token}"
        return headers

    def _log_request(
        self, method: str, url: str, params: dict[str, Any] | None, body: Any
    ) -> None:
        logger.debug(
            f"API Request: method={method.lower()} url={url} params={params} "
            f"data={body}"
        )

    def _log_error(self, method: str, url: str, error: httpx.HTTPError) -> None:
        response = (
            error.response if isinstance(error, httpx.HTTPStatusError) else None
        )
        logger.error(
            f"API Error: url={url} method={method.lower()} "
            f"status={_status_of(error)} "
            f"data={_body_of(response) if response is not None else None} "
            f"message={error}"
        )


def _status_of(error: httpx.HTTPError) -> int | None:
    if isinstance(error, httpx.HTTPStatusError):
        return error.response.status_code
    return None


def _body_of(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def upstream_message(error: httpx.HTTPError) -> str:
    """Best human-readable message for an API failure.

    Prefers the ``message`` field of the upstream JSON body.
    """
    if isinstance(error, httpx.HTTPStatusError):
        body = _body_of(error.response)
        if isinstance(body, dict) and body.get("message"):
            return str(body["message"])
    return str(error)

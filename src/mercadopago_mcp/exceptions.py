"""Exceptions raised by the Mercado Pago MCP server.

Only startup configuration and the OAuth token exchange get their own
exception types. API failures after a token is attached stay httpx
exceptions; tool handlers and the dispatcher turn those into tool
responses.

- ConfigError: the process cannot start until its environment is fixed
- AuthError: no bearer token could be obtained for the current tool call
"""


class MercadoPagoMCPError(Exception):
    """Base exception for failures the server can explain to its operator.

    Carries what went wrong (``errors``), what to change (``suggestions``,
    e.g. which environment variable to set) and non-secret facts about the
    failure (``context``, e.g. the identity endpoint's status code). Never
    put credentials or bearer tokens in any of them.
    """

    def __init__(
        self,
        message: str,
        *,
        errors: list[str] | None = None,
        suggestions: list[str] | None = None,
        context: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.errors = list(errors or [])
        self.suggestions = list(suggestions or [])
        self.context = dict(context or {})


class ConfigError(MercadoPagoMCPError):
    """Application configuration errors - recoverable by user reconfiguration.

    Raised at startup when the settings cannot be loaded:
    - Missing CLIENT_ID or CLIENT_SECRET
    - Out-of-range optional settings (timeouts, URLs)

    The server does not start when this is raised.
    """

    pass


class AuthError(MercadoPagoMCPError):
    """OAuth client-credentials exchange failed.

    Wraps transport failures, non-2xx answers and malformed token payloads
    from the identity endpoint. Fatal for the tool call that triggered the
    exchange; the request pipeline only retries after a token has actually
    been used and rejected with 401.
    """

    pass

"""Configuration management."""

import logging
import sys
from functools import cache

from pydantic import (
    ConfigDict,
    Field,
    SecretStr,
    ValidationError,
    computed_field,
    field_validator,
)
from pydantic_settings import BaseSettings

from .consts import (
    API_BASE_URL,
    AUTH_BASE_URL,
    AUTH_URL_PATH,
    CUSTOMERS_URL_PATH,
    DEVELOPERS_URL_PATH,
    IDENTIFICATION_TYPES_URL_PATH,
    PAYMENT_METHODS_URL_PATH,
    SEARCH_URL_PATH,
)
from .exceptions import ConfigError
from .models import Credentials


class Config(BaseSettings):
    """Configuration with computed API endpoints.

    Credentials and the debug switch are read from the unprefixed
    ``CLIENT_ID``, ``CLIENT_SECRET`` and ``DEBUG`` variables; everything else
    takes the ``MERCADOPAGO_MCP_`` prefix.
    """

    model_config = ConfigDict(
        env_prefix="MERCADOPAGO_MCP_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )
    client_id: SecretStr = Field(
        validation_alias="CLIENT_ID", description="OAuth application client id"
    )
    client_secret: SecretStr = Field(
        validation_alias="CLIENT_SECRET", description="OAuth application secret"
    )
    debug: str = Field(
        default="",
        validation_alias="DEBUG",
        description="Any non-empty value enables verbose logging",
    )
    api_base_url: str = Field(
        default=API_BASE_URL, description="Base URL for the Mercado Pago API"
    )
    auth_base_url: str = Field(
        default=AUTH_BASE_URL, description="Base URL for the OAuth identity API"
    )
    timeout_seconds: float | None = Field(
        default=None,
        gt=0,
        le=300,
        description="HTTP request timeout in seconds (unset waits indefinitely)",
    )

    @field_validator("client_id", "client_secret")
    @classmethod
    def _not_blank(cls, value: SecretStr) -> SecretStr:
        if not value.get_secret_value():
            raise ValueError("must not be empty")
        return value

    @computed_field
    @property
    def log_level(self) -> str:
        """Logging level derived from DEBUG."""
        return "DEBUG" if self.debug else "INFO"

    @computed_field
    @property
    def auth_url(self) -> str:
        """URL for the client-credentials token exchange."""
        return f"{self.auth_base_url}{AUTH_URL_PATH}"

    @computed_field
    @property
    def developers_url(self) -> str:
        """Base URL that relative API paths resolve against."""
        return f"{self.api_base_url}{DEVELOPERS_URL_PATH}"

    @computed_field
    @property
    def customers_url(self) -> str:
        """URL for customer creation."""
        return f"{self.api_base_url}{CUSTOMERS_URL_PATH}"

    @computed_field
    @property
    def identification_types_url(self) -> str:
        """URL for the identification (document) types listing."""
        return f"{self.api_base_url}{IDENTIFICATION_TYPES_URL_PATH}"

    @computed_field
    @property
    def payment_methods_url(self) -> str:
        """URL for the payment methods listing."""
        return f"{self.api_base_url}{PAYMENT_METHODS_URL_PATH}"

    @computed_field
    @property
    def search_url(self) -> str:
        """URL for documentation search."""
        return f"{self.developers_url}{SEARCH_URL_PATH}"

    @property
    def credentials(self) -> Credentials:
        return Credentials(
            client_id=self.client_id.get_secret_value(),
            client_secret=self.client_secret.get_secret_value(),
        )

    def __repr__(self) -> str:
        return (
            f"Config(api_base_url='{self.api_base_url}', "
            f"log_level='{self.log_level}')"
        )


def load_config(**overrides) -> Config:
    """Build a Config from the environment.

    Raises:
        ConfigError: If required settings are missing or invalid.
    """
    try:
        return Config(**overrides)
    except ValidationError as e:
        fields = []
        errors = []
        for err in e.errors():
            field = str(err["loc"][0]) if err["loc"] else "settings"
            fields.append(field)
            errors.append(f"{field}: {err['msg']}")
        missing_credentials = {"CLIENT_ID", "CLIENT_SECRET"} & set(fields)
        raise ConfigError(
            (
                "Missing required environment variables"
                if missing_credentials
                else "Invalid configuration"
            ),
            errors=errors,
            suggestions=["Set CLIENT_ID and CLIENT_SECRET in the server environment"],
            context={
                "CLIENT_ID": "CLIENT_ID" not in fields,
                "CLIENT_SECRET": "CLIENT_SECRET" not in fields,
            },
        ) from e


@cache
def get_config() -> Config:
    """Get a cached Config instance."""
    return load_config()


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """Route the ``mercadopago-mcp.*`` loggers to stderr.

    stdout is reserved for the MCP stdio transport, so nothing may be
    written there. ``log_level`` is ``Config.log_level``: DEBUG adds the
    per-request API traces, INFO keeps lifecycle and tool invocation lines.
    Any handlers installed earlier are replaced.
    """
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
        force=True,
    )
    return logging.getLogger("mercadopago-mcp")

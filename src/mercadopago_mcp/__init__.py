"""Mercado Pago MCP Server Package

A Model Context Protocol (MCP) server exposing Mercado Pago customer,
payment-method and documentation-search tools, backed by an OAuth
client-credentials API client that retries once on expired tokens.
"""

from .auth import AuthProvider, TokenStore
from .client import MercadoPagoClient
from .config import Config, get_config, load_config
from .consts import PACKAGE_VERSION
from .dispatcher import ToolDispatcher
from .exceptions import AuthError, ConfigError, MercadoPagoMCPError
from .models import ToolResponse
from .tools import Tools

__version__ = PACKAGE_VERSION

__all__ = [
    "__version__",
    "get_config",
    "load_config",
    "Config",
    "AuthProvider",
    "TokenStore",
    "MercadoPagoClient",
    "Tools",
    "ToolDispatcher",
    "ToolResponse",
    "MercadoPagoMCPError",
    "ConfigError",
    "AuthError",
]

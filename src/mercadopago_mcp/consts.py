"""High-value constants for the Mercado Pago MCP package."""

# Package metadata
PACKAGE_VERSION = "0.1.0"
SERVER_NAME = "mercadopago"
USER_AGENT = f"mercadopago-mcp/{PACKAGE_VERSION}"

# External API contract consts
API_BASE_URL = "https://api.mercadopago.com"
AUTH_BASE_URL = "https://api.mercadolibre.com"
AUTH_URL_PATH = "/oauth/token"
DEVELOPERS_URL_PATH = "/developers"
CUSTOMERS_URL_PATH = "/v1/customers"
IDENTIFICATION_TYPES_URL_PATH = "/v1/identification_types"
PAYMENT_METHODS_URL_PATH = "/v1/payment_methods"
# relative to the developers base
SEARCH_URL_PATH = "/docs/v1/search"

# Business logic consts
DEFAULT_SEARCH_LIMIT = 10
MIN_SEARCH_LIMIT = 1
MAX_SEARCH_LIMIT = 100

SITE_DOMAINS = {
    "MLA": "www.mercadopago.com.ar",
    "MLB": "www.mercadopago.com.br",
    "MLM": "www.mercadopago.com.mx",
    "MLU": "www.mercadopago.com.uy",
    "MLC": "www.mercadopago.cl",
    "MCO": "www.mercadopago.com.co",
    "MPE": "www.mercadopago.com.pe",
}

"""MCP tools"""

import logging

import httpx
from mcp import types

from .client import MercadoPagoClient, upstream_message
from .config import Config
from .consts import MAX_SEARCH_LIMIT, MIN_SEARCH_LIMIT
from .formatting import (
    render_document_types,
    render_payment_methods,
    render_search_results,
)
from .models import (
    CreateCustomerArgs,
    RequestContext,
    SearchDocumentationArgs,
    SearchResult,
    SiteId,
    ToolResponse,
)

logger = logging.getLogger("mercadopago-mcp.tools")

DOCUMENT_TYPES_FALLBACK = "No document types found. Try again later."
PAYMENT_METHODS_FALLBACK = "No payments found. Try again later."
# Same copy as document_types; kept as observed
CREATE_CUSTOMER_FALLBACK = DOCUMENT_TYPES_FALLBACK

EMPTY_OBJECT_SCHEMA = {"type": "object", "properties": {}, "required": []}

TOOL_DEFINITIONS = [
    types.Tool(
        name="create_customer",
        description="Create a new customer in Mercado Pago",
        inputSchema={
            "type": "object",
            "properties": {
                "email": {"type": "string", "description": "Email of the customer"},
            },
            "required": ["email"],
        },
    ),
    types.Tool(
        name="document_types",
        description="Get available Mercado Pago document types",
        inputSchema=EMPTY_OBJECT_SCHEMA,
    ),
    types.Tool(
        name="payments_methods",
        description="Get available Mercado Pago payments methods",
        inputSchema=EMPTY_OBJECT_SCHEMA,
    ),
    types.Tool(
        name="search_documentation",
        description="Search Mercado Pago documentation",
        inputSchema={
            "type": "object",
            "properties": {
                "language": {
                    "type": "string",
                    "enum": ["es", "pt"],
                    "description": "Language of the documentation (es: Spanish, pt: Portuguese)",
                },
                "query": {"type": "string", "description": "Search query"},
                "siteId": {
                    "type": "string",
                    "description": "Site ID for documentation",
                    "enum": [site.value for site in SiteId],
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of results to return (default: 10)",
                    "minimum": MIN_SEARCH_LIMIT,
                    "maximum": MAX_SEARCH_LIMIT,
                },
            },
            "required": ["language", "query", "siteId"],
        },
    ),
]


class Tools:
    """Tool handlers backed by the Mercado Pago client.

    Each handler absorbs upstream failures: it logs them and returns its
    fallback ToolResponse instead of raising.
    """

    def __init__(self, client: MercadoPagoClient, config: Config):
        self.client = client
        self.config = config
        logger.info("tools initialized")

    async def create_customer(
        self, args: CreateCustomerArgs, context: RequestContext
    ) -> ToolResponse:
        """Create a customer from an email address"""
        try:
            data = await self.client.post_json(
                self.config.customers_url, json={"email": args.email}
            )
            return ToolResponse.text(
                f"Customer created successfully with id: {data['user_id']}"
            )
        except Exception as e:
            _log_failure(context, e)
        return ToolResponse.text(CREATE_CUSTOMER_FALLBACK)

    async def document_types(self, context: RequestContext) -> ToolResponse:
        """List identification document types"""
        try:
            data = await self.client.get_json(self.config.identification_types_url)
            return ToolResponse.text(render_document_types(data))
        except Exception as e:
            _log_failure(context, e)
        return ToolResponse.text(DOCUMENT_TYPES_FALLBACK)

    async def payments_methods(self, context: RequestContext) -> ToolResponse:
        """List payment methods"""
        try:
            data = await self.client.get_json(self.config.payment_methods_url)
            return ToolResponse.text(render_payment_methods(data))
        except Exception as e:
            _log_failure(context, e)
        return ToolResponse.text(PAYMENT_METHODS_FALLBACK)

    async def search_documentation(
        self, args: SearchDocumentationArgs, context: RequestContext
    ) -> ToolResponse:
        """Search the developer documentation of one site"""
        try:
            data = await self.client.get_json(
                self.config.search_url,
                params={
                    "term": args.query,
                    "lang": args.language,
                    "siteId": args.site_id.value,
                    "maxResults": args.max_results,
                },
            )
            if not isinstance(data, list):
                raise ValueError("No search results available for the given query")

            if not data:
                return ToolResponse.text(
                    f'No documentation found for query "{args.query}". '
                    "Try a different search term."
                )

            results = [SearchResult.model_validate(item) for item in data]
            return ToolResponse.text(
                render_search_results(
                    args.query, results, args.site_id.value, args.language
                )
            )
        except Exception as e:
            _log_failure(context, e)
            return ToolResponse.text(
                f"Error searching documentation: {_message_of(e)}", is_error=True
            )


def _message_of(error: Exception) -> str:
    if isinstance(error, httpx.HTTPError):
        return upstream_message(error)
    return str(error) or "Unknown error occurred"


def _log_failure(context: RequestContext, error: Exception) -> None:
    logger.error(
        f"Tool handler failed: {context.to_log()} "
        f"error={type(error).__name__}: {error}"
    )


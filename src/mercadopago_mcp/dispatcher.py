"""Tool call routing, argument validation and result normalization."""

import itertools
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

import httpx
from mcp import types
from mcp.shared.exceptions import McpError
from mcp.types import INTERNAL_ERROR, INVALID_PARAMS, METHOD_NOT_FOUND, ErrorData
from pydantic import ValidationError

from .client import upstream_message
from .exceptions import AuthError
from .models import (
    CreateCustomerArgs,
    NoArguments,
    RequestContext,
    SearchDocumentationArgs,
    ToolArguments,
    ToolResponse,
)
from .tools import TOOL_DEFINITIONS, Tools

logger = logging.getLogger("mercadopago-mcp.dispatcher")


@dataclass(frozen=True)
class ToolRoute:
    """A declared tool bound to its argument model and handler."""

    definition: types.Tool
    arguments: type[ToolArguments]
    handler: Callable[[ToolArguments, RequestContext], Awaitable[ToolResponse]]


class ToolDispatcher:
    """Validates tool calls and routes them to their handlers.

    Each call moves Received -> Validated -> Executing -> Completed/Failed.
    Unknown tools and invalid arguments are rejected with protocol errors
    before any handler runs; handler results are returned verbatim.
    """

    def __init__(self, tools: Tools):
        self.tools = tools
        self._request_ids = itertools.count(1)
        definitions = {tool.name: tool for tool in TOOL_DEFINITIONS}
        self.routes: dict[str, ToolRoute] = {
            "create_customer": ToolRoute(
                definitions["create_customer"],
                CreateCustomerArgs,
                tools.create_customer,
            ),
            "document_types": ToolRoute(
                definitions["document_types"],
                NoArguments,
                lambda args, context: tools.document_types(context),
            ),
            "payments_methods": ToolRoute(
                definitions["payments_methods"],
                NoArguments,
                lambda args, context: tools.payments_methods(context),
            ),
            "search_documentation": ToolRoute(
                definitions["search_documentation"],
                SearchDocumentationArgs,
                tools.search_documentation,
            ),
        }

    def list_tools(self) -> list[types.Tool]:
        return [route.definition for route in self.routes.values()]

    def create_context(self, tool_name: str) -> RequestContext:
        return RequestContext(
            tool_name=tool_name, request_id=f"req_{next(self._request_ids)}"
        )

    async def dispatch(
        self, name: str, arguments: dict[str, Any] | None
    ) -> ToolResponse:
        """Run one tool call.

        Args:
            name: Tool name.
            arguments: Raw tool arguments.

        Returns:
            The handler's ToolResponse, or an error ToolResponse when an API
            failure escapes the handler.

        Raises:
            McpError: METHOD_NOT_FOUND for unknown tools, INVALID_PARAMS for
                invalid arguments, INTERNAL_ERROR for auth and unexpected
                failures.
        """
        context = self.create_context(name)
        logger.info(f"Tool invoked: context={context.to_log()} args={arguments}")

        route = self.routes.get(name)
        if route is None:
            logger.error(f"Unknown tool: {context.to_log()}")
            raise McpError(
                ErrorData(code=METHOD_NOT_FOUND, message=f"Unknown tool: {name}")
            )

        args = self._validate(route, name, arguments)

        try:
            result = await route.handler(args, context)
        except Exception as e:
            return self._handle_failure(context, e)

        logger.debug(
            f"Tool execution completed: {context.to_log()} "
            f"duration={context.elapsed_ms}ms"
        )
        return result

    def _validate(
        self, route: ToolRoute, name: str, arguments: dict[str, Any] | None
    ) -> ToolArguments:
        try:
            return route.arguments.model_validate(arguments or {})
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(loc) for loc in err['loc']) or 'arguments'}: "
                f"{err['msg']}"
                for err in e.errors()
            )
            logger.error(f"Invalid {name} arguments: {details}")
            raise McpError(
                ErrorData(
                    code=INVALID_PARAMS,
                    message=f"Invalid {name} arguments: {details}",
                )
            ) from e

    def _handle_failure(self, context: RequestContext, error: Exception) -> ToolResponse:
        logger.error(
            f"Tool execution failed: {context.to_log()} "
            f"error={type(error).__name__}: {error}",
            exc_info=error,
        )

        if isinstance(error, httpx.HTTPError):
            return ToolResponse.text(
                f"MercadoPago API error: {upstream_message(error)}", is_error=True
            )
        if isinstance(error, McpError):
            raise error
        if isinstance(error, AuthError):
            raise McpError(
                ErrorData(code=INTERNAL_ERROR, message=error.message)
            ) from error
        raise McpError(
            ErrorData(code=INTERNAL_ERROR, message=f"Internal error: {error}")
        ) from error

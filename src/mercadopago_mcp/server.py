"""Mercado Pago MCP server implementation."""

import logging
import sys

import anyio
from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .client import MercadoPagoClient
from .config import Config, load_config, setup_logging
from .consts import PACKAGE_VERSION, SERVER_NAME
from .dispatcher import ToolDispatcher
from .exceptions import ConfigError
from .tools import Tools

logger = logging.getLogger("mercadopago-mcp.server")


def create_server(dispatcher: ToolDispatcher) -> Server:
    """Create the MCP server bound to a dispatcher.

    tools/call is registered as a raw request handler so that McpError
    raised by the dispatcher reaches the caller as a JSON-RPC error
    instead of an error tool result.
    """
    server = Server(SERVER_NAME, version=PACKAGE_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        logger.debug("list_tools called")
        return dispatcher.list_tools()

    async def call_tool(request: types.CallToolRequest) -> types.ServerResult:
        response = await dispatcher.dispatch(
            request.params.name, request.params.arguments
        )
        return types.ServerResult(response.to_result())

    server.request_handlers[types.CallToolRequest] = call_tool
    return server


async def serve(config: Config) -> None:
    """Run the server over stdio until the client disconnects."""
    async with MercadoPagoClient(config) as client:
        dispatcher = ToolDispatcher(Tools(client, config))
        server = create_server(dispatcher)

        logger.debug("Connecting to stdio transport")
        async with stdio_server() as (read_stream, write_stream):
            logger.info("Server running and ready")
            await server.run(
                read_stream, write_stream, server.create_initialization_options()
            )


def main() -> None:
    """Main entry point. Exits with status 1 on any startup or runtime failure."""
    try:
        config = load_config()
    except ConfigError as e:
        setup_logging()
        logger.error(f"{e.message}: {e.context} {e.errors}")
        sys.exit(1)

    setup_logging(config.log_level)
    logger.info("Starting MercadoPago MCP server")

    try:
        anyio.run(serve, config)
    except Exception as e:
        logger.error(f"Server failed: {e}", exc_info=e)
        sys.exit(1)


if __name__ == "__main__":
    main()

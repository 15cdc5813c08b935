"""MCP server exposing the Wix REST tools over stdio."""

import asyncio
import logging
import sys
from typing import Any, Mapping, Optional

from mcp import types as mcp_types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from .client import WixClient
from .config import WixConfig, configure_logging, load_config
from .exceptions import ConfigurationError, InvalidRequestError, TransportError
from .tools import TOOLS, TOOLS_BY_NAME

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')

SERVER_NAME = "wix-mcp"


def _error_result(text: str) -> mcp_types.CallToolResult:
    return mcp_types.CallToolResult(
        content=[mcp_types.TextContent(type="text", text=text)],
        isError=True,
    )


async def dispatch_tool(client: WixClient, name: str, arguments: Optional[Mapping[str, Any]]) -> mcp_types.CallToolResult:
    """Run the named tool and turn caller and transport failures into error results

    Upstream HTTP errors come back from the handler as envelopes with isError
    set. Invalid input and transport failures are reported as plain text so
    they are never mistaken for an upstream response.
    """
    arguments = arguments or {}
    logging.info(f"[WixMCP] call_tool invoked: name={name}, arg_keys={sorted(arguments)}")

    spec = TOOLS_BY_NAME.get(name)
    if spec is None:
        logging.warning(f"[WixMCP] Unknown tool name: {name}")
        return _error_result(f"Tool not found: {name}")

    try:
        result = await spec.handler(client, arguments)
    except InvalidRequestError as e:
        logging.warning(f"[WixMCP] Invalid request for '{name}': {e}")
        return _error_result(f"Invalid request: {e}")
    except TransportError as e:
        logging.error(f"[WixMCP] Transport failure in '{name}': {e}")
        return _error_result(f"Transport error: {e}")
    except Exception as e:
        logging.exception(f"[WixMCP] Exception during call_tool execution for '{name}': {e}")
        return _error_result(f"Unexpected error: {e}")

    logging.info(f"[WixMCP] {name} finished (isError={result.isError})")
    return result


def build_mcp_wix_server(config: WixConfig) -> Server:
    client = WixClient(config)
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools():
        logging.info("[WixMCP] Listing available tools.")
        return [spec.tool for spec in TOOLS]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict):
        return await dispatch_tool(client, name, arguments)

    return server


def load_config_or_exit() -> WixConfig:
    configure_logging()
    try:
        config = load_config()
    except ConfigurationError as e:
        logging.error(str(e))
        sys.exit(1)
    logging.info(f"[WixMCP] Loaded configuration: {config.describe()}")
    return config


async def run_stdio(config: WixConfig) -> None:
    server = build_mcp_wix_server(config)
    logging.info("[WixMCP] Starting Wix MCP server (stdio transport)")
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    config = load_config_or_exit()
    asyncio.run(run_stdio(config))


if __name__ == "__main__":
    main()

__all__ = ["build_mcp_wix_server", "dispatch_tool", "load_config_or_exit", "run_stdio", "main"]

import contextlib
import logging
import os
import sys
from collections.abc import AsyncIterator

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route
from starlette.types import Receive, Scope, Send

from wix_mcp.config import WixConfig
from wix_mcp.server import SERVER_NAME, build_mcp_wix_server, load_config_or_exit
from wix_mcp.tools import TOOLS

logging.basicConfig(stream=sys.stderr, level=logging.INFO, format='[%(levelname)s] %(message)s')


async def health_handler(request: Request) -> JSONResponse:
    return JSONResponse({
        "status": "healthy",
        "server": SERVER_NAME,
        "tools": [spec.name for spec in TOOLS],
    })


def build_starlette_app(config: WixConfig) -> Starlette:
    mcp_server = build_mcp_wix_server(config)

    session_manager = StreamableHTTPSessionManager(
        app=mcp_server,
        event_store=None,
        json_response=True,
        stateless=True,
    )

    async def handle_streamable_http(scope: Scope, receive: Receive, send: Send) -> None:
        await session_manager.handle_request(scope, receive, send)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        """Context manager for session manager lifecycle."""
        async with session_manager.run():
            logging.info("[WixHTTP] Wix MCP Streamable HTTP Server started")
            logging.info(f"[WixHTTP]   - Tools: {[spec.name for spec in TOOLS]}")
            try:
                yield
            finally:
                logging.info("[WixHTTP] Wix MCP Server shutting down...")

    return Starlette(
        routes=[
            Route("/health", health_handler, methods=["GET"]),
            Mount("/", app=handle_streamable_http),
        ],
        lifespan=lifespan,
    )


def main():
    port = int(os.getenv("PORT", 8080))
    host = os.getenv("HOST", "0.0.0.0")

    config = load_config_or_exit()
    starlette_app = build_starlette_app(config)
    logging.info(f"[WixHTTP] Listening on http://{host}:{port} (POST / for MCP, GET /health)")

    import uvicorn
    uvicorn.run(starlette_app, host=host, port=port)


if __name__ == "__main__":
    main()

from __future__ import annotations

import asyncio
import logging
import os
import sys
import typing as t

import uvicorn
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from fastmcp.server.http import create_sse_app
from pydantic import Field

from model_client import HostedModelClient, InferenceConfig, TextCompletionClient
from .errors import HistoricalEventsError
from .handler import handle_historical_events


logger = logging.getLogger(__name__)

SERVER_NAME = "Historical Events"
SERVER_VERSION = "1.0.0"

TOOL_NAME = "historical_events"
TOOL_DESCRIPTION = "Gets exactly 2 historical events that happened on a given date"

DEFAULT_HOST = os.getenv("HISTORICAL_EVENTS_HOST", "0.0.0.0")
DEFAULT_PORT = int(os.getenv("HISTORICAL_EVENTS_PORT", "8000"))
DEFAULT_SSE_PATH = os.getenv("HISTORICAL_EVENTS_SSE_PATH", "/mcp/sse")
DEFAULT_HTTP_PATH = "/mcp"
# Mounted path, so POSTs to /mcp/?session_id=... reach the SSE message handler
DEFAULT_MESSAGE_PATH = os.getenv("HISTORICAL_EVENTS_MESSAGE_PATH", "/mcp/")

Transport = t.Literal["sse", "http", "stdio"]


def create_server(client: TextCompletionClient) -> FastMCP:
    """
    Build the MCP server with the historical_events tool bound to ``client``.
    """
    mcp = FastMCP(
        SERVER_NAME,
        version=SERVER_VERSION,
        instructions="Answers with two historical events that happened on a given month and day.",
    )

    @mcp.tool(name=TOOL_NAME, description=TOOL_DESCRIPTION)
    async def historical_events(
        date: t.Annotated[str, Field(description="Date in YYYY-MM-DD format")],
    ) -> str:
        try:
            # The model call blocks; keep it off the event loop
            result = await asyncio.to_thread(handle_historical_events, {"date": date}, client)
        except HistoricalEventsError as e:
            raise ToolError(e.message) from e
        return result.text

    return mcp


def build_sse_app(mcp: FastMCP, sse_path: str = DEFAULT_SSE_PATH, message_path: str = DEFAULT_MESSAGE_PATH):
    """
    Build the SSE ASGI app: event stream on ``sse_path``, client messages on ``message_path``.
    """
    return create_sse_app(server=mcp, message_path=message_path, sse_path=sse_path)


def configure_logging(level: int = logging.INFO) -> None:
    """Send log records to stderr; stdout carries the stdio transport."""
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def run(
    transport: Transport = "sse",
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
    path: t.Optional[str] = None,
) -> None:
    """Create the server from environment configuration and serve it."""
    config = InferenceConfig.from_env()
    mcp = create_server(HostedModelClient(config))
    logger.info("Inference endpoint: %s", config.endpoint_url)

    if transport == "stdio":
        mcp.run(transport="stdio")
        return

    if transport == "sse":
        sse_path = path or DEFAULT_SSE_PATH
        logger.info("Server running on %s:%d (sse %s, messages %s)", host, port, sse_path, DEFAULT_MESSAGE_PATH)
        uvicorn.run(build_sse_app(mcp, sse_path=sse_path), host=host, port=port)
        return

    path = path or DEFAULT_HTTP_PATH
    logger.info("Server running on %s:%d (%s, path %s)", host, port, transport, path)
    mcp.run(transport=transport, host=host, port=port, path=path)


if __name__ == "__main__":
    configure_logging()
    run()

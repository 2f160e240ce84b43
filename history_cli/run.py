# -*- coding: utf-8 -*-
import asyncio
import json
import logging
import typing as t

import click
import httpx
from fastmcp import Client
from fastmcp.exceptions import ToolError
from rich.console import Console
from rich.json import JSON
from rich.panel import Panel
from rich.table import Table

from historical_events_server.server import (
    DEFAULT_HOST, DEFAULT_PORT, TOOL_NAME,
    configure_logging, run as run_server,
)


console = Console()
err_console = Console(stderr=True)

DEFAULT_SERVER_URL = f"http://localhost:{DEFAULT_PORT}/mcp/sse"

# Raised by fastmcp.Client when the server cannot be reached
CLIENT_ERRORS = (httpx.HTTPError, RuntimeError, OSError)


async def fetch_tool_schemas(url: str) -> list[dict[str, t.Any]]:
    """List the tools exposed by a running server."""
    async with Client(url) as client:
        tools = await client.list_tools()
    return [
        {
            "name": tool.name,
            "description": tool.description or "",
            "inputSchema": tool.inputSchema or {},
        }
        for tool in tools
    ]


async def ask_historical_events(url: str, date: str) -> str:
    """Call the historical_events tool on a running server and return its text."""
    async with Client(url) as client:
        result = await client.call_tool(TOOL_NAME, {"date": date})
    return "\n".join(block.text for block in result.content if block.type == "text")


def create_tools_table(schemas: list[dict[str, t.Any]]) -> Table:
    """Create a summary table of tool names, descriptions and arguments."""
    table = Table(title="MCP Tools", show_header=True, header_style="bold magenta")
    table.add_column("Name", style="cyan")
    table.add_column("Description", style="white")
    table.add_column("Arguments", style="yellow")

    for schema in schemas:
        properties = schema["inputSchema"].get("properties", {})
        table.add_row(schema["name"], schema["description"], ", ".join(properties))

    return table


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
def main() -> None:
    """Historical events MCP server and client."""


@main.command()
@click.option("--host", default=DEFAULT_HOST, show_default=True, help="Interface to bind.")
@click.option("--port", default=DEFAULT_PORT, show_default=True, type=int, help="Port to listen on.")
@click.option(
    "--transport",
    type=click.Choice(["sse", "http", "stdio"]),
    default="sse",
    show_default=True,
    help="MCP transport to serve.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def serve(host: str, port: int, transport: str, verbose: bool) -> None:
    """Start the historical events MCP server."""
    configure_logging(level=logging.DEBUG if verbose else logging.INFO)
    try:
        run_server(transport=transport, host=host, port=port)
    except RuntimeError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)


@main.command()
@click.option("--url", default=DEFAULT_SERVER_URL, show_default=True, help="URL of a running server.")
@click.option("--json", "as_json", is_flag=True, help="Print raw JSON schemas.")
def tools(url: str, as_json: bool) -> None:
    """List the tools exposed by a running server."""
    try:
        schemas = asyncio.run(fetch_tool_schemas(url))
    except CLIENT_ERRORS as e:
        err_console.print(f"[red]Error:[/red] could not reach {url}: {e}")
        raise SystemExit(1)

    if as_json:
        console.print(JSON(json.dumps(schemas, indent=2)))
    else:
        console.print(create_tools_table(schemas))


@main.command()
@click.argument("date")
@click.option("--url", default=DEFAULT_SERVER_URL, show_default=True, help="URL of a running server.")
def ask(date: str, url: str) -> None:
    """Ask a running server for historical events on DATE (YYYY-MM-DD)."""
    try:
        with console.status(f"[bold green]Asking for events on {date}..."):
            text = asyncio.run(ask_historical_events(url, date))
    except ToolError as e:
        err_console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)
    except CLIENT_ERRORS as e:
        err_console.print(f"[red]Error:[/red] could not reach {url}: {e}")
        raise SystemExit(1)

    console.print(Panel(text, title=f"Historical events: {date}", border_style="blue"))


if __name__ == "__main__":
    main()

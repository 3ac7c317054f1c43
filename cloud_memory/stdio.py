"""MCP server over standard input/output."""

import logging
from typing import Any

from mcp.server import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents
from mcp.server.stdio import stdio_server
from mcp.types import Resource, TextContent, Tool

from .core import GRAPH_RESOURCE_MIME_TYPE, SERVER_NAME, MemoryServerError
from .dispatcher import Dispatcher

logger = logging.getLogger(__name__)


def create_mcp_server(dispatcher: Dispatcher) -> Server:
    """Create and configure an MCP server exposing the dispatcher's tools and resources."""
    server = Server(SERVER_NAME)

    @server.list_tools()
    async def list_tools() -> list[Tool]:
        """List the tools enabled for this profile."""
        return [Tool(**definition) for definition in dispatcher.list_tools()]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any] | None) -> list[TextContent]:
        """Handle tool calls. Failures are raised so the SDK flags the result with isError."""
        result = await dispatcher.call_tool(name, arguments)
        if result.get("isError"):
            raise MemoryServerError("\n".join(item["text"] for item in result["content"]))
        return [TextContent(type="text", text=item["text"]) for item in result["content"]]

    @server.list_resources()
    async def list_resources() -> list[Resource]:
        return [Resource(**resource) for resource in dispatcher.list_resources()]

    @server.read_resource()
    async def read_resource(uri) -> list[ReadResourceContents]:
        text = dispatcher.read_resource(str(uri))
        return [ReadResourceContents(content=text, mime_type=GRAPH_RESOURCE_MIME_TYPE)]

    return server


async def serve(dispatcher: Dispatcher):
    """Run the MCP server on stdin/stdout until the client disconnects."""
    server = create_mcp_server(dispatcher)

    logger.info("Starting Cloud Memory MCP server on stdio...")
    logger.info(f"Memory will be persisted to: {dispatcher.store.path}")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())

"""
MCP server exposing the Street View tools to an agent host over stdio.
"""
import json
import logging
import sys
from functools import partial
from typing import Any, Dict, List, Optional

from anyio import to_thread
import mcp.types as types
from mcp.server.lowlevel import Server
from mcp.server.stdio import stdio_server

from streetview_explorer.config import SERVER_NAME, SERVER_VERSION
from streetview_explorer.dispatcher import ToolDispatcher

logger = logging.getLogger(__name__)


def tool_definitions(dispatcher: ToolDispatcher) -> List[types.Tool]:
    return [
        types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema())
        for spec in dispatcher.tools.values()
    ]


def to_call_result(envelope: dict) -> types.CallToolResult:
    """The envelope goes out twice: as JSON text for display and as structured content."""
    return types.CallToolResult(
        content=[types.TextContent(type="text", text=json.dumps(envelope, indent=2))],
        structuredContent=envelope,
        isError=not envelope["ok"],
    )


def create_server(dispatcher: ToolDispatcher) -> Server:
    server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> List[types.Tool]:
        return tool_definitions(dispatcher)

    # Arguments are validated by the dispatcher so that failures come back as envelopes.
    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> types.CallToolResult:
        try:
            envelope = await to_thread.run_sync(partial(dispatcher.dispatch, name, arguments))
        except Exception:
            logger.exception(f"Unexpected error while running {name}, shutting down")
            sys.exit(1)
        return to_call_result(envelope)

    return server


async def run_stdio(server: Server) -> None:
    async with stdio_server() as (read_stream, write_stream):
        logger.info("Street View Explorer MCP server connected over stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())

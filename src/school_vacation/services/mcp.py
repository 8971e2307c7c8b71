from __future__ import annotations

import logging
from typing import Any, Optional

from fastmcp.exceptions import ToolError
from fastmcp.server import FastMCP
from fastmcp.server.middleware import Middleware, MiddlewareContext
from fastmcp.tools import FunctionTool
from fastmcp.tools.tool import ToolResult

from ..api import get_api_functions, invoke_tool, render_json
from ..config import AppSettings, get_settings
from ..protocol.jsonrpc import INSTRUCTIONS

MCP_TRANSPORTS = ("stdio", "sse")

logger = logging.getLogger(__name__)


class ToolCallMiddleware(Middleware):
    """Runs tool calls through the shared registry.

    Rejected calls surface as ``{error, tool, arguments}`` tool errors and are
    logged once, at INFO, by :func:`invoke_tool`. FastMCP's tool manager is
    never reached, so it does not log a traceback for a bad region or date.
    """

    async def on_call_tool(self, context: MiddlewareContext, call_next: Any) -> ToolResult:
        params = context.message
        logger.info("MCP tool call: %s", params.name)
        outcome = invoke_tool(params.name, params.arguments or {})
        if outcome.is_error:
            raise ToolError(render_json(outcome.payload))
        return ToolResult(structured_content=outcome.payload)


def build_mcp_server(settings: Optional[AppSettings] = None) -> FastMCP:
    settings = settings or get_settings()
    server = FastMCP(name=settings.server.name, instructions=INSTRUCTIONS)
    server.add_middleware(ToolCallMiddleware())
    for spec in get_api_functions():
        logger.debug("Registering MCP tool: %s", spec.name)
        tool = FunctionTool.from_function(
            spec.func,
            name=spec.name,
            description=spec.description,
            tags=set(spec.tags),
        )
        server.add_tool(tool)
    return server


def run_mcp_server(transport: str, host: str, port: int, settings: Optional[AppSettings] = None) -> None:
    if transport not in MCP_TRANSPORTS:
        raise ValueError(f"Unsupported MCP transport: {transport}")
    server = build_mcp_server(settings)
    if transport == "stdio":
        logger.info("School Vacation MCP Server running on stdio")
        server.run(transport="stdio")
    else:
        logger.info("School Vacation MCP Server (SSE) running on %s:%d", host, port)
        server.run(transport="sse", host=host, port=port)

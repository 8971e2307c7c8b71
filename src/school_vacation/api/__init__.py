"""Tool surface shared by every MCP binding."""

from __future__ import annotations

from .registry import (
    ApiFunction,
    ToolOutcome,
    call_api,
    get_api_function,
    get_api_functions,
    invoke_tool,
    register_api,
)
from .serializers import render_json, serialize_outcome
from .state import api_state

# Import tools so decorators run at module import time.
from . import tools  # noqa: F401

__all__ = [
    "ApiFunction",
    "ToolOutcome",
    "api_state",
    "call_api",
    "get_api_function",
    "get_api_functions",
    "invoke_tool",
    "register_api",
    "render_json",
    "serialize_outcome",
]

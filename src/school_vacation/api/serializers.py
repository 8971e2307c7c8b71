from __future__ import annotations

from typing import Any, Dict

import orjson

from .registry import ToolOutcome


def render_json(payload: Any) -> str:
    return orjson.dumps(payload, option=orjson.OPT_INDENT_2, default=str).decode("utf-8")


def serialize_outcome(outcome: ToolOutcome) -> Dict[str, Any]:
    """Shape a tool outcome as an MCP ``tools/call`` result."""

    return {
        "content": [{"type": "text", "text": render_json(outcome.payload)}],
        "structuredContent": outcome.payload,
        "isError": outcome.is_error,
    }

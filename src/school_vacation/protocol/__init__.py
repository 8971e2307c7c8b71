"""MCP JSON-RPC handling and session routing."""

from __future__ import annotations

from .jsonrpc import (
    LATEST_PROTOCOL_VERSION,
    SUPPORTED_PROTOCOL_VERSIONS,
    McpProtocolHandler,
    ServerInfo,
    error_response,
    is_initialize_request,
    is_notification,
    success_response,
)
from .sessions import McpSession, SessionRegistry

__all__ = [
    "LATEST_PROTOCOL_VERSION",
    "SUPPORTED_PROTOCOL_VERSIONS",
    "McpProtocolHandler",
    "McpSession",
    "ServerInfo",
    "SessionRegistry",
    "error_response",
    "is_initialize_request",
    "is_notification",
    "success_response",
]

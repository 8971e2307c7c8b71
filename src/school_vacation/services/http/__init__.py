"""HTTP bindings for the school vacation MCP server."""

from .server import create_http_app, run_http_server
from .streamable import create_streamable_app, run_streamable_server

__all__ = [
    "create_http_app",
    "create_streamable_app",
    "run_http_server",
    "run_streamable_server",
]

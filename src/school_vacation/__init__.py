"""School vacation calendar MCP server."""

from __future__ import annotations

from .config.settings import APP_VERSION

__version__ = APP_VERSION

__all__ = ["__version__", "main"]


def main() -> None:
    from .cli import main as cli_main

    cli_main()

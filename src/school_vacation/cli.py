from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

from .api import api_state
from .config import get_settings
from .domain import LoadError
from .logging import configure_logging


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="School vacation MCP server.")
    parser.add_argument("--log-level", default=None, help="Override SCHOOL_VACATION_LOG_LEVEL.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("stdio", help="Serve MCP over stdin/stdout.")

    help_texts = {
        "sse": "Serve MCP over Server-Sent Events (FastMCP).",
        "http": "Serve stateless JSON-RPC and REST tool endpoints.",
        "streamable": "Serve session-oriented streamable HTTP on /mcp.",
    }
    for name, text in help_texts.items():
        sub = subparsers.add_parser(name, help=text)
        sub.add_argument("--host", default=settings.server.host)
        sub.add_argument("--port", type=int, default=settings.server.port)

    return parser


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    logger = logging.getLogger(__name__)
    logger.info("School vacation MCP starting (%s)", args.command)

    try:
        context = api_state.context
    except LoadError as exc:
        logger.critical("Cannot start: %s", exc)
        sys.exit(1)
    logger.info("Calendar covers %s to %s", context.table.first_day, context.table.last_day)

    if args.command in ("stdio", "sse"):
        from .services.mcp import run_mcp_server

        run_mcp_server(args.command, getattr(args, "host", ""), getattr(args, "port", 0))
    elif args.command == "http":
        from .services.http import run_http_server

        run_http_server(host=args.host, port=args.port)
    elif args.command == "streamable":
        from .services.http import run_streamable_server

        run_streamable_server(host=args.host, port=args.port)
    else:  # pragma: no cover - argparse enforces choices
        parser.print_help()


if __name__ == "__main__":
    main()

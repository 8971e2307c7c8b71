from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, Response, StreamingResponse

from ...config import AppSettings, get_settings
from ...protocol import McpProtocolHandler, ServerInfo, SessionRegistry
from .common import (
    SESSION_HEADER,
    audit_request,
    bearer_auth,
    build_status_router,
    configure_app,
    read_json,
    run_app,
)

KEEPALIVE_SECONDS = 15.0

logger = logging.getLogger(__name__)


def create_streamable_app(
    registry: Optional[SessionRegistry] = None,
    settings: Optional[AppSettings] = None,
    *,
    keepalive_seconds: float = KEEPALIVE_SECONDS,
) -> FastAPI:
    """Session-oriented binding: every client is routed through ``registry``."""

    settings = settings or get_settings()
    if registry is None:
        registry = SessionRegistry(McpProtocolHandler(ServerInfo.from_settings(settings)))
    require_token = bearer_auth(settings.server.auth_token)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        closed = registry.close_all(reason="transport teardown")
        logger.info("Streamable transport stopped; %d session(s) closed", closed)

    app = FastAPI(title="School Vacation MCP (Streamable HTTP)", version=settings.server.version, lifespan=lifespan)
    app.state.sessions = registry
    configure_app(app)
    def session_status() -> Dict[str, Any]:
        sessions = registry.sessions()
        return {"activeSessions": len(sessions), "sessions": [session.describe() for session in sessions]}

    app.include_router(build_status_router(settings.server.name, extra=session_status))

    @app.post("/mcp", dependencies=[Depends(require_token)])
    async def handle_message(request: Request) -> Response:
        message = await read_json(request)
        audit_request(request, message)
        session, response = registry.route(message, request.headers.get(SESSION_HEADER))
        headers = {SESSION_HEADER: session.session_id} if session is not None else {}
        if response is None:
            return Response(status_code=202, headers=headers)
        return JSONResponse(response, headers=headers)

    @app.get("/mcp", dependencies=[Depends(require_token)])
    async def open_stream(request: Request) -> StreamingResponse:
        session = registry.lookup(request.headers.get(SESSION_HEADER))
        logger.info("Establishing SSE stream for session: %s", session.session_id)

        async def keepalive() -> AsyncIterator[str]:
            yield ": stream opened\n\n"
            while session.session_id in registry:
                await asyncio.sleep(keepalive_seconds)
                if await request.is_disconnected():
                    logger.info("SSE stream closed by client for session: %s", session.session_id)
                    return
                yield ": keepalive\n\n"

        return StreamingResponse(
            keepalive(),
            media_type="text/event-stream",
            headers={SESSION_HEADER: session.session_id, "Cache-Control": "no-cache"},
        )

    @app.delete("/mcp", dependencies=[Depends(require_token)])
    async def close_session(request: Request) -> Response:
        registry.close(request.headers.get(SESSION_HEADER), reason="client request")
        return Response(status_code=204)

    return app


def run_streamable_server(host: str, port: int, settings: Optional[AppSettings] = None) -> None:
    run_app(create_streamable_app(settings=settings), host, port)

from __future__ import annotations

import hmac
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

import orjson
from fastapi import APIRouter, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ...domain import InvalidSessionError, JsonRpcError
from ...protocol.jsonrpc import FORBIDDEN, PARSE_ERROR, SESSION_ERROR, UNAUTHORIZED, error_response

SESSION_HEADER = "Mcp-Session-Id"

logger = logging.getLogger(__name__)
audit_logger = logging.getLogger("school_vacation.audit")


class AuthenticationError(Exception):
    def __init__(self, status_code: int, error: JsonRpcError) -> None:
        super().__init__(error.message)
        self.status_code = status_code
        self.error = error


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def bearer_auth(token: Optional[str]) -> Callable[[Request], None]:
    """Build a dependency enforcing ``Authorization: Bearer <token>`` when a token is set."""

    if not token:
        logger.warning("MCP_AUTH_TOKEN not set - authentication is DISABLED")

    def dependency(request: Request) -> None:
        if not token:
            return
        header = request.headers.get("authorization")
        if not header:
            raise AuthenticationError(
                401,
                JsonRpcError(
                    UNAUTHORIZED,
                    "Unauthorized - missing authorization header",
                    {"hint": 'Include "Authorization: Bearer <token>" header'},
                ),
            )
        scheme, _, supplied = header.partition(" ")
        if scheme.lower() != "bearer" or not hmac.compare_digest(supplied.strip(), token):
            raise AuthenticationError(403, JsonRpcError(FORBIDDEN, "Forbidden - invalid authentication token"))

    return dependency


def audit_request(request: Request, message: Any) -> None:
    params = message.get("params") if isinstance(message, dict) else None
    entry = {
        "timestamp": _timestamp(),
        "method": request.method,
        "path": request.url.path,
        "ip": request.client.host if request.client else None,
        "userAgent": request.headers.get("user-agent"),
        "mcpMethod": message.get("method") if isinstance(message, dict) else None,
        "mcpParams": sorted(params) if isinstance(params, dict) else None,
    }
    audit_logger.info("[AUDIT] %s", orjson.dumps(entry).decode("utf-8"))


async def read_json(request: Request) -> Any:
    raw = await request.body()
    try:
        return orjson.loads(raw)
    except orjson.JSONDecodeError as exc:
        raise JsonRpcError(PARSE_ERROR, "Parse error - request body is not valid JSON") from exc


def build_status_router(service: str, extra: Optional[Callable[[], Dict[str, Any]]] = None) -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    async def health() -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": "healthy", "timestamp": _timestamp(), "service": service}
        if extra is not None:
            payload.update(extra())
        return payload

    @router.get("/ping")
    async def ping() -> Dict[str, Any]:
        return {"message": "pong", "timestamp": _timestamp()}

    return router


def configure_app(app: FastAPI) -> None:
    """Install CORS and the JSON-RPC shaped error handlers shared by both HTTP apps."""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=[SESSION_HEADER],
    )

    @app.exception_handler(AuthenticationError)
    async def _authentication_failed(request: Request, exc: AuthenticationError) -> JSONResponse:
        logger.warning("Rejected %s %s: %s", request.method, request.url.path, exc.error.message)
        return JSONResponse(error_response(None, exc.error), status_code=exc.status_code)

    @app.exception_handler(JsonRpcError)
    async def _protocol_error(request: Request, exc: JsonRpcError) -> JSONResponse:
        return JSONResponse(error_response(None, exc), status_code=400)

    @app.exception_handler(InvalidSessionError)
    async def _invalid_session(request: Request, exc: InvalidSessionError) -> JSONResponse:
        logger.error("Invalid request: %s", exc)
        return JSONResponse(error_response(None, JsonRpcError(SESSION_ERROR, str(exc))), status_code=400)


def run_app(app: FastAPI, host: str, port: int) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    asyncio.run(serve(app, config))

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse

from ...api import ApiFunction, call_api, get_api_functions
from ...config import AppSettings, get_settings
from ...domain import JsonRpcError, SchoolVacationError, UnknownToolError
from ...protocol import McpProtocolHandler, ServerInfo, error_response
from ...protocol.jsonrpc import INVALID_REQUEST
from .common import audit_request, bearer_auth, build_status_router, configure_app, read_json, run_app

logger = logging.getLogger(__name__)


def _serialize_api_function(api_function: ApiFunction) -> Dict[str, Any]:
    return {
        "name": api_function.name,
        "description": api_function.description,
        "category": api_function.category,
        "parameters": api_function.parameter_schema,
    }


def create_http_app(settings: Optional[AppSettings] = None) -> FastAPI:
    """Stateless binding: JSON-RPC on ``POST /mcp`` plus REST-style tool calls."""

    settings = settings or get_settings()
    protocol = McpProtocolHandler(ServerInfo.from_settings(settings))
    require_token = bearer_auth(settings.server.auth_token)

    app = FastAPI(title="School Vacation MCP", version=settings.server.version)
    configure_app(app)
    app.include_router(build_status_router(settings.server.name))

    @app.get("/mcp")
    async def describe_server() -> JSONResponse:
        return JSONResponse(
            {
                "name": settings.server.name,
                "version": settings.server.version,
                "description": "MCP server for school vacation calendar lookups",
                "tools": [_serialize_api_function(func) for func in get_api_functions()],
            }
        )

    @app.post("/mcp", dependencies=[Depends(require_token)])
    async def handle_rpc(request: Request) -> JSONResponse:
        message = await read_json(request)
        audit_request(request, message)
        if isinstance(message, dict) and message.get("id") is None and message.get("jsonrpc") == "2.0":
            error = JsonRpcError(INVALID_REQUEST, "Invalid Request - missing id")
            return JSONResponse(error_response(None, error))
        return JSONResponse(protocol.handle(message))

    @app.post("/tools/{function_name}", dependencies=[Depends(require_token)])
    async def invoke_api_function(
        function_name: str,
        arguments: Optional[Dict[str, Any]] = Body(default=None),
    ) -> JSONResponse:
        try:
            result = call_api(function_name, arguments or {})
        except UnknownToolError as exc:
            logger.warning("API function not found: %s", function_name)
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        except SchoolVacationError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("API function %s failed", function_name)
            raise HTTPException(status_code=500, detail=str(exc) or "Unknown error occurred") from exc
        logger.debug("API function %s executed successfully", function_name)
        return JSONResponse(result)

    return app


def run_http_server(host: str, port: int, settings: Optional[AppSettings] = None) -> None:
    run_app(create_http_app(settings), host, port)

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Dict, Optional

from ..api import get_api_functions, invoke_tool, serialize_outcome
from ..domain import JsonRpcError

if TYPE_CHECKING:
    from ..config import AppSettings
    from .sessions import McpSession

JSONRPC_VERSION = "2.0"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")
LATEST_PROTOCOL_VERSION = SUPPORTED_PROTOCOL_VERSIONS[-1]

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
SESSION_ERROR = -32000
UNAUTHORIZED = -32001
FORBIDDEN = -32002

logger = logging.getLogger(__name__)

Message = Dict[str, Any]


def is_initialize_request(message: Any) -> bool:
    return isinstance(message, dict) and message.get("method") == "initialize" and "id" in message


def is_notification(message: Any) -> bool:
    return isinstance(message, dict) and "method" in message and "id" not in message


def success_response(request_id: Any, result: Any) -> Message:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def error_response(request_id: Any, error: JsonRpcError) -> Message:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "error": error.to_dict()}


INSTRUCTIONS = (
    "School vacation calendar for Belgium, the Netherlands and Luxembourg (2019-2028). "
    "Use check_school_vacation for a single DD/MM/YYYY date, get_vacation_periods for "
    "contiguous vacation periods, and get_supported_regions to list valid regions."
)


@dataclass(frozen=True)
class ServerInfo:
    name: str
    version: str
    instructions: str = INSTRUCTIONS

    @classmethod
    def from_settings(cls, settings: "AppSettings") -> "ServerInfo":
        return cls(name=settings.server.name, version=settings.server.version)


class McpProtocolHandler:
    """Dispatches MCP JSON-RPC messages to the shared tool registry.

    The handler holds no per-client state; session-scoped details live on the
    optional :class:`McpSession` passed to :meth:`handle`.
    """

    def __init__(self, server_info: ServerInfo) -> None:
        self.server_info = server_info
        self._methods: Dict[str, Callable[[Dict[str, Any], Optional["McpSession"]], Any]] = {
            "initialize": self._initialize,
            "ping": self._ping,
            "tools/list": self._list_tools,
            "tools/call": self._call_tool,
        }

    def handle(self, message: Any, *, session: Optional["McpSession"] = None) -> Optional[Message]:
        request_id = message.get("id") if isinstance(message, dict) else None
        try:
            self._validate_envelope(message)
            if is_notification(message):
                self._notify(message, session)
                return None
            method = self._methods.get(message["method"])
            if method is None:
                raise JsonRpcError(METHOD_NOT_FOUND, f"Method not found: {message['method']}")
            params = message.get("params") or {}
            if not isinstance(params, dict):
                raise JsonRpcError(INVALID_PARAMS, "params must be an object")
            return success_response(request_id, method(params, session))
        except JsonRpcError as exc:
            return error_response(request_id, exc)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unhandled error while processing %r", message)
            return error_response(request_id, JsonRpcError(INTERNAL_ERROR, str(exc) or "Internal error"))

    @staticmethod
    def _validate_envelope(message: Any) -> None:
        if not isinstance(message, dict):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Request - expected a JSON object")
        if message.get("jsonrpc") != JSONRPC_VERSION:
            raise JsonRpcError(INVALID_REQUEST, "Invalid Request - missing or invalid jsonrpc version")
        if not isinstance(message.get("method"), str):
            raise JsonRpcError(INVALID_REQUEST, "Invalid Request - missing method")

    def _notify(self, message: Message, session: Optional["McpSession"]) -> None:
        method = message["method"]
        if method == "notifications/initialized" and session is not None:
            session.initialized = True
            logger.info("Session %s completed initialization", session.session_id)
        else:
            logger.debug("Ignoring notification %s", method)

    def _initialize(self, params: Dict[str, Any], session: Optional["McpSession"]) -> Dict[str, Any]:
        requested = params.get("protocolVersion")
        version = requested if requested in SUPPORTED_PROTOCOL_VERSIONS else LATEST_PROTOCOL_VERSION
        if session is not None:
            session.protocol_version = version
            session.client_info = dict(params.get("clientInfo") or {})
        result: Dict[str, Any] = {
            "protocolVersion": version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": self.server_info.name, "version": self.server_info.version},
        }
        if self.server_info.instructions:
            result["instructions"] = self.server_info.instructions
        return result

    @staticmethod
    def _ping(params: Dict[str, Any], session: Optional["McpSession"]) -> Dict[str, Any]:
        return {}

    @staticmethod
    def _list_tools(params: Dict[str, Any], session: Optional["McpSession"]) -> Dict[str, Any]:
        return {"tools": [spec.as_tool() for spec in get_api_functions()]}

    @staticmethod
    def _call_tool(params: Dict[str, Any], session: Optional["McpSession"]) -> Dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            raise JsonRpcError(INVALID_PARAMS, "tools/call requires a tool name")
        arguments = params.get("arguments")
        outcome = invoke_tool(name, arguments if arguments is not None else {})
        return serialize_outcome(outcome)

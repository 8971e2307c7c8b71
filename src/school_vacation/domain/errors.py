from __future__ import annotations

from typing import Any, Optional


class SchoolVacationError(Exception):
    """Base class for errors raised by the calendar engine and its adapters."""


class LoadError(SchoolVacationError):
    """The calendar dataset is missing or corrupt; the process must not serve."""


class UnknownRegionError(SchoolVacationError, ValueError):
    def __init__(self, region: str) -> None:
        super().__init__(f"Unknown region: {region}")
        self.region = region


class InvalidSessionError(SchoolVacationError):
    def __init__(self, message: str, *, session_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.session_id = session_id


class UnknownToolError(SchoolVacationError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name

    def __str__(self) -> str:
        return str(self.args[0])


class ToolArgumentsError(SchoolVacationError, ValueError):
    def __init__(self, tool: str, detail: str) -> None:
        super().__init__(f"Invalid arguments for {tool}: {detail}")
        self.tool = tool
        self.detail = detail


class JsonRpcError(SchoolVacationError):
    """Protocol-level failure rendered as a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> dict:
        error: dict = {"code": self.code, "message": self.message}
        if self.data is not None:
            error["data"] = self.data
        return error

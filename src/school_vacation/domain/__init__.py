"""Domain models for the school vacation calendar."""

from __future__ import annotations

from .enums import REGION_ALIASES, REGION_NAMES, Country, Region
from .errors import (
    InvalidSessionError,
    JsonRpcError,
    LoadError,
    SchoolVacationError,
    ToolArgumentsError,
    UnknownRegionError,
    UnknownToolError,
)
from .models import DayRecord, VacationPeriod

__all__ = [
    "Country",
    "DayRecord",
    "InvalidSessionError",
    "JsonRpcError",
    "LoadError",
    "REGION_ALIASES",
    "REGION_NAMES",
    "Region",
    "SchoolVacationError",
    "ToolArgumentsError",
    "UnknownRegionError",
    "UnknownToolError",
    "VacationPeriod",
]

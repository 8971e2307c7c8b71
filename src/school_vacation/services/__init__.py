"""Application services wrapping the calendar engine."""

from __future__ import annotations

from .context import ServiceContext
from .vacations import VacationQueryEngine, group_periods

__all__ = ["ServiceContext", "VacationQueryEngine", "group_periods"]

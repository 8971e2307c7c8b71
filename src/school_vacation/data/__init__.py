"""Data access layer."""

from __future__ import annotations

from .calendar_table import CalendarTable

__all__ = ["CalendarTable"]

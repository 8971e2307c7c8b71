"""Configuration models and helpers."""

from __future__ import annotations

from .settings import AppSettings, DatasetSettings, LoggingSettings, ServerSettings, get_settings

__all__ = ["AppSettings", "DatasetSettings", "LoggingSettings", "ServerSettings", "get_settings"]

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from platformdirs import user_log_dir

load_dotenv()

APP_NAME = "school-vacation-mcp"
APP_AUTHOR = "SchoolVacation"
APP_VERSION = "1.0.0"
DEFAULT_DATASET = "kalender 2019_2028.csv"


@dataclass(frozen=True)
class DatasetSettings:
    path: Path
    encoding: str


@dataclass(frozen=True)
class ServerSettings:
    name: str
    version: str
    host: str
    port: int
    auth_token: Optional[str]

    @property
    def auth_enabled(self) -> bool:
        return bool(self.auth_token)


@dataclass(frozen=True)
class LoggingSettings:
    level: str
    directory: Path


@dataclass(frozen=True)
class AppSettings:
    dataset: DatasetSettings
    server: ServerSettings
    logging: LoggingSettings


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    dataset = DatasetSettings(
        path=Path(os.getenv("SCHOOL_VACATION_DATASET", DEFAULT_DATASET)),
        encoding=os.getenv("SCHOOL_VACATION_ENCODING", "utf-8"),
    )

    server = ServerSettings(
        name=APP_NAME,
        version=APP_VERSION,
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int_from_env("PORT", 3000),
        auth_token=os.getenv("MCP_AUTH_TOKEN") or None,
    )

    logging = LoggingSettings(
        level=os.getenv("SCHOOL_VACATION_LOG_LEVEL", "INFO").upper(),
        directory=Path(os.getenv("SCHOOL_VACATION_LOG_DIR") or user_log_dir(APP_NAME, APP_AUTHOR)),
    )

    return AppSettings(dataset=dataset, server=server, logging=logging)

from __future__ import annotations

from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, List, Set

import pytest

from school_vacation.api import api_state
from school_vacation.config import AppSettings, DatasetSettings, LoggingSettings, ServerSettings
from school_vacation.data import CalendarTable
from school_vacation.domain import Region
from school_vacation.services import ServiceContext, VacationQueryEngine

HEADER = (
    "Datum;Weekdag;Week;Weekend;Vlaanderen;-;Wallonie;-;Noord;-;Midden;Zuid;Luxemburg;"
    "Feestdag BE;-;Feestdag NL;-;Feestdag LU;-;-"
)
FIRST_DAY = date(2019, 1, 1)
LAST_DAY = date(2020, 1, 10)
WEEKDAYS = ["maandag", "dinsdag", "woensdag", "donderdag", "vrijdag", "zaterdag", "zondag"]


def _span(start: date, end: date) -> Set[date]:
    return {start + timedelta(days=offset) for offset in range((end - start).days + 1)}


VACATIONS: Dict[Region, Set[date]] = {
    Region.FLANDERS: (
        _span(date(2019, 1, 1), date(2019, 1, 6))
        | _span(date(2019, 3, 4), date(2019, 3, 10))
        | _span(date(2019, 12, 23), date(2020, 1, 5))
    ),
    Region.WALLONIA: _span(date(2019, 1, 1), date(2019, 1, 4)) | {date(2019, 12, 25)},
    Region.LUXEMBOURG: {date(2019, 1, 2), date(2019, 1, 4)},
}
HOLIDAYS_BE = {date(2019, 1, 1), date(2019, 12, 25)}


def format_day(day: date) -> str:
    return day.strftime("%d/%m/%Y")


def make_row(day: date) -> str:
    fields: List[str] = [""] * 20
    fields[0] = format_day(day)
    fields[1] = WEEKDAYS[day.weekday()]
    fields[2] = str(day.isocalendar()[1])
    fields[3] = "1" if day.weekday() >= 5 else "0"
    columns = {
        Region.FLANDERS: 4,
        Region.WALLONIA: 6,
        Region.NORTH_NETHERLANDS: 8,
        Region.MIDDLE_NETHERLANDS: 10,
        Region.SOUTH_NETHERLANDS: 11,
        Region.LUXEMBOURG: 12,
    }
    for region, index in columns.items():
        fields[index] = "1" if day in VACATIONS.get(region, set()) else "0"
    fields[13] = "1" if day in HOLIDAYS_BE else "0"
    fields[15] = "0"
    fields[17] = "0"
    return ";".join(fields)


def build_lines(days: Iterable[date]) -> List[str]:
    return [HEADER, *(make_row(day) for day in days)]


def all_days() -> List[date]:
    return sorted(_span(FIRST_DAY, LAST_DAY))


@pytest.fixture
def dataset_path(tmp_path: Path) -> Path:
    path = tmp_path / "kalender.csv"
    path.write_text("\n".join(build_lines(all_days())) + "\n", encoding="utf-8")
    return path


@pytest.fixture
def table(dataset_path: Path) -> CalendarTable:
    return CalendarTable.load(dataset_path)


@pytest.fixture
def engine(table: CalendarTable) -> VacationQueryEngine:
    return VacationQueryEngine(table)


@pytest.fixture
def settings(dataset_path: Path, tmp_path: Path) -> AppSettings:
    return AppSettings(
        dataset=DatasetSettings(path=dataset_path, encoding="utf-8"),
        server=ServerSettings(
            name="school-vacation-mcp",
            version="1.0.0",
            host="127.0.0.1",
            port=3000,
            auth_token=None,
        ),
        logging=LoggingSettings(level="DEBUG", directory=tmp_path / "logs"),
    )


@pytest.fixture
def context(settings: AppSettings, table: CalendarTable):
    bound = api_state.bind(ServiceContext(settings=settings, table=table))
    yield bound
    api_state.reset()

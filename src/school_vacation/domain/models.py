from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Sequence

from .enums import Country, Region

TRUTHY = "1"
MIN_FIELDS = 20

# Column positions in the source table.
DATE_COLUMN = 0
WEEKDAY_COLUMN = 1
WEEKEND_COLUMN = 3
REGION_COLUMNS: Dict[Region, int] = {
    Region.FLANDERS: 4,
    Region.WALLONIA: 6,
    Region.NORTH_NETHERLANDS: 8,
    Region.MIDDLE_NETHERLANDS: 10,
    Region.SOUTH_NETHERLANDS: 11,
    Region.LUXEMBOURG: 12,
}
HOLIDAY_COLUMNS: Dict[Country, int] = {
    Country.BELGIUM: 13,
    Country.NETHERLANDS: 15,
    Country.LUXEMBOURG: 17,
}


def parse_date_literal(literal: str) -> date:
    """Read a ``DD/MM/YYYY`` literal by reordering it to ``YYYY-MM-DD``."""

    return date.fromisoformat("-".join(reversed(literal.split("/"))))


def format_date_literal(value: date) -> str:
    return value.strftime("%d/%m/%Y")


def _flag(columns: Sequence[str], index: int) -> bool:
    return index < len(columns) and columns[index] == TRUTHY


@dataclass(frozen=True, slots=True)
class DayRecord:
    date: str
    day: date
    weekday: str = ""
    is_weekend: bool = False
    region_flags: Mapping[Region, bool] = field(default_factory=dict)
    holiday_flags: Mapping[Country, bool] = field(default_factory=dict)

    @classmethod
    def from_columns(cls, columns: Sequence[str]) -> "DayRecord":
        literal = columns[DATE_COLUMN].strip()
        return cls(
            date=literal,
            day=parse_date_literal(literal),
            weekday=columns[WEEKDAY_COLUMN].strip(),
            is_weekend=_flag(columns, WEEKEND_COLUMN),
            region_flags=MappingProxyType(
                {region: _flag(columns, index) for region, index in REGION_COLUMNS.items()}
            ),
            holiday_flags=MappingProxyType(
                {country: _flag(columns, index) for country, index in HOLIDAY_COLUMNS.items()}
            ),
        )

    def is_vacation(self, region: Region) -> bool:
        return bool(self.region_flags.get(region, False))


@dataclass(frozen=True, slots=True)
class VacationPeriod:
    start: date
    end: date

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1

    def to_dict(self) -> Dict[str, str]:
        return {"start": format_date_literal(self.start), "end": format_date_literal(self.end)}


def periods_to_dicts(periods: Optional[List[VacationPeriod]]) -> List[Dict[str, str]]:
    return [period.to_dict() for period in periods or []]

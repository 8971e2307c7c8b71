from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Iterable, List, Optional

from ..data import CalendarTable
from ..domain import DayRecord, Region, VacationPeriod

ONE_DAY = timedelta(days=1)


def group_periods(days: Iterable[DayRecord]) -> List[VacationPeriod]:
    """Collapse chronologically ordered vacation days into maximal runs.

    A day extends the open period only when it falls exactly one calendar day
    after the period's end; any gap closes the period and opens a new one.
    """

    periods: List[VacationPeriod] = []
    current: Optional[VacationPeriod] = None
    for record in days:
        if current is not None and record.day == current.end + ONE_DAY:
            current = VacationPeriod(start=current.start, end=record.day)
            continue
        if current is not None:
            periods.append(current)
        current = VacationPeriod(start=record.day, end=record.day)
    if current is not None:
        periods.append(current)
    return periods


@dataclass(frozen=True, slots=True)
class VacationQueryEngine:
    """Read-only queries over a loaded :class:`CalendarTable`."""

    table: CalendarTable

    def is_vacation_day(self, date: str, region: str) -> bool:
        resolved = Region.resolve(region)
        record = self.table.find_by_date(date)
        if record is None:
            return False
        return record.is_vacation(resolved)

    def list_vacation_periods(self, region: str, year: Optional[int] = None) -> List[VacationPeriod]:
        resolved = Region.resolve(region)
        # Filtering by year before grouping splits periods that straddle New Year.
        records = self.table.in_year(year) if year is not None else self.table.records
        return group_periods(record for record in records if record.is_vacation(resolved))

    @staticmethod
    def list_supported_regions() -> List[Region]:
        return list(Region)


__all__ = ["VacationQueryEngine", "group_periods"]

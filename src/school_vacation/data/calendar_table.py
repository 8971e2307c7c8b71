from __future__ import annotations

import logging
from datetime import date, timedelta
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ..domain.errors import LoadError
from ..domain.models import DATE_COLUMN, MIN_FIELDS, DayRecord

FIELD_DELIMITER = ";"

logger = logging.getLogger(__name__)


class CalendarTable:
    """Immutable, date-indexed snapshot of the per-day calendar dataset.

    Records keep file order, which is chronological order. Lookups by date go
    through a dict keyed by the ``DD/MM/YYYY`` literal exactly as stored.
    """

    __slots__ = ("_records", "_by_date", "_origin")

    def __init__(self, records: Iterable[DayRecord], *, origin: str = "<memory>") -> None:
        ordered: Tuple[DayRecord, ...] = tuple(records)
        index: Dict[str, DayRecord] = {}
        for record in ordered:
            if record.date in index:
                raise LoadError(f"{origin}: duplicate date {record.date}")
            index[record.date] = record
        self._records = ordered
        self._by_date = index
        self._origin = origin
        self._check_continuity()

    @classmethod
    def load(cls, path: Union[str, Path], *, encoding: str = "utf-8") -> "CalendarTable":
        source = Path(path)
        try:
            text = source.read_text(encoding=encoding)
        except FileNotFoundError as exc:
            raise LoadError(f"Calendar dataset not found: {source}") from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise LoadError(f"Calendar dataset unreadable: {source}: {exc}") from exc
        table = cls.parse(text.splitlines(), origin=str(source))
        if not table:
            raise LoadError(f"Calendar dataset has no usable rows: {source}")
        logger.info("Loaded %d calendar days from %s", len(table), source)
        return table

    @classmethod
    def parse(cls, lines: Iterable[str], *, origin: str = "<memory>") -> "CalendarTable":
        records: List[DayRecord] = []
        for line_number, raw in enumerate(lines, start=1):
            if line_number == 1:
                continue  # header
            line = raw.strip()
            if not line:
                continue
            columns = line.split(FIELD_DELIMITER)
            if len(columns) < MIN_FIELDS:
                logger.debug("%s:%d: skipping row with %d fields", origin, line_number, len(columns))
                continue
            try:
                records.append(DayRecord.from_columns(columns))
            except ValueError as exc:
                raise LoadError(
                    f"{origin}:{line_number}: invalid date {columns[DATE_COLUMN]!r}"
                ) from exc
        return cls(records, origin=origin)

    def _check_continuity(self) -> None:
        for previous, current in zip(self._records, self._records[1:]):
            if current.day - previous.day != timedelta(days=1):
                logger.warning(
                    "%s: calendar is not contiguous between %s and %s",
                    self._origin,
                    previous.date,
                    current.date,
                )

    def find_by_date(self, literal: str) -> Optional[DayRecord]:
        return self._by_date.get(literal)

    def in_year(self, year: int) -> List[DayRecord]:
        return [record for record in self._records if record.day.year == year]

    @property
    def records(self) -> Tuple[DayRecord, ...]:
        return self._records

    @property
    def first_day(self) -> Optional[date]:
        return self._records[0].day if self._records else None

    @property
    def last_day(self) -> Optional[date]:
        return self._records[-1].day if self._records else None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DayRecord]:
        return iter(self._records)

    def __contains__(self, literal: object) -> bool:
        return literal in self._by_date


__all__ = ["CalendarTable", "FIELD_DELIMITER"]

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from school_vacation.data import CalendarTable
from school_vacation.domain import Country, LoadError, Region

from .conftest import HEADER, all_days, build_lines, make_row


def test_load_indexes_every_row(table: CalendarTable) -> None:
    assert len(table) == len(all_days())
    assert table.first_day == date(2019, 1, 1)
    assert table.last_day == date(2020, 1, 10)


def test_find_by_date_is_exact_literal_match(table: CalendarTable) -> None:
    record = table.find_by_date("01/01/2019")
    assert record is not None
    assert record.day == date(2019, 1, 1)
    assert record.weekday == "dinsdag"
    assert record.region_flags[Region.FLANDERS] is True
    assert record.holiday_flags[Country.BELGIUM] is True
    assert table.find_by_date("1/1/2019") is None
    assert table.find_by_date("2019-01-01") is None


def test_header_is_discarded_without_validation() -> None:
    lines = ["not;a;real;header", make_row(date(2019, 1, 1))]
    table = CalendarTable.parse(lines)
    assert [record.date for record in table] == ["01/01/2019"]


def test_short_and_blank_lines_are_skipped() -> None:
    lines = [HEADER, make_row(date(2019, 1, 1)), "", "   ", "02/01/2019;woensdag;1", make_row(date(2019, 1, 2))]
    table = CalendarTable.parse(lines)
    assert [record.date for record in table] == ["01/01/2019", "02/01/2019"]


def test_only_exact_one_is_truthy() -> None:
    fields = make_row(date(2019, 1, 1)).split(";")
    fields[4] = "true"
    fields[6] = " 1"
    fields[8] = "1"
    table = CalendarTable.parse([HEADER, ";".join(fields)])
    record = table.find_by_date("01/01/2019")
    assert record is not None
    assert record.region_flags[Region.FLANDERS] is False
    assert record.region_flags[Region.WALLONIA] is False
    assert record.region_flags[Region.NORTH_NETHERLANDS] is True


def test_duplicate_dates_fail_the_load() -> None:
    row = make_row(date(2019, 1, 1))
    with pytest.raises(LoadError, match="duplicate date 01/01/2019"):
        CalendarTable.parse([HEADER, row, row])


def test_unparseable_date_fails_the_load() -> None:
    fields = make_row(date(2019, 1, 1)).split(";")
    fields[0] = "31/02/2019"
    with pytest.raises(LoadError, match="invalid date"):
        CalendarTable.parse([HEADER, ";".join(fields)])


def test_missing_file_is_a_load_error(tmp_path: Path) -> None:
    with pytest.raises(LoadError, match="not found"):
        CalendarTable.load(tmp_path / "missing.csv")


def test_file_without_rows_is_a_load_error(tmp_path: Path) -> None:
    path = tmp_path / "empty.csv"
    path.write_text(HEADER + "\n", encoding="utf-8")
    with pytest.raises(LoadError, match="no usable rows"):
        CalendarTable.load(path)


def test_gaps_are_logged_not_fatal(caplog: pytest.LogCaptureFixture) -> None:
    lines = build_lines([date(2019, 1, 1), date(2019, 1, 3)])
    with caplog.at_level("WARNING"):
        table = CalendarTable.parse(lines)
    assert len(table) == 2
    assert "not contiguous" in caplog.text


def test_in_year_filters_by_parsed_date(table: CalendarTable) -> None:
    assert len(table.in_year(2019)) == 365
    assert len(table.in_year(2020)) == 10
    assert table.in_year(2027) == []

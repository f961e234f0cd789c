# tests/unit/pipelines/test_record_parser.py
from __future__ import annotations

import datetime as dt

import pytest

from gps_signal_report.models import DROPPED, NormalizedRecord, RawRow
from gps_signal_report.pipelines.record_parser import (
    EPOCH_DATE,
    delay_in_days,
    parse_record,
    parse_records,
    parse_report_date,
)
from gps_signal_report.rules.city_extractor import SIMPLE_RULES


class Logger:
    def __init__(self):
        self.messages = []
        self.debugs = []

    def debug(self, msg, *args, **k):
        self.debugs.append(msg % args)

    def info(self, msg, *args, **k):
        self.messages.append(msg % args)

    def warning(self, *a, **k): pass
    def error(self, *a, **k): pass


@pytest.mark.parametrize("raw, expected", [
    ("01/01/2024 10:00", dt.date(2024, 1, 1)),
    ("12/31/2023", dt.date(2023, 12, 31)),
    ("1/5/2024 08:00:00 AM", dt.date(2024, 1, 5)),
    ("  02/29/2024   13:00", dt.date(2024, 2, 29)),
])
def test_parse_report_date_reads_leading_token(raw, expected):
    assert parse_report_date(raw) == expected


@pytest.mark.parametrize("raw", ["", "   ", None, "2024-01-01", "13/01/2024", "02/30/2024", "01/01/24", "yesterday"])
def test_parse_report_date_falls_back_to_epoch(raw):
    assert parse_report_date(raw) == EPOCH_DATE


def test_delay_in_days_whole_days():
    assert delay_in_days(dt.date(2024, 1, 10), dt.date(2024, 1, 1)) == 9
    # time of day on `now` does not add a day until 24h have passed
    assert delay_in_days(dt.datetime(2024, 1, 10, 23, 59), dt.date(2024, 1, 1)) == 9
    assert delay_in_days(dt.date(2024, 1, 1), dt.date(2024, 1, 1)) == 0


def test_delay_in_days_truncates_toward_zero_for_future_dates():
    assert delay_in_days(dt.datetime(2024, 1, 1, 12), dt.date(2024, 1, 3)) == -1


def test_delay_in_days_ignores_timezone_on_now():
    now = dt.datetime(2024, 1, 10, tzinfo=dt.timezone.utc)
    assert delay_in_days(now, dt.date(2024, 1, 1)) == 9


def test_parse_record_happy_path():
    out = parse_record(RawRow("  AB123 ", "01/01/2024 10:00", "Addis Ababa, Ethiopia"),
                       dt.date(2024, 1, 10))
    assert out == NormalizedRecord(
        license_plate="AB123",
        parsed_date=dt.date(2024, 1, 1),
        delay_days=9,
        city="Addis Ababa",
    )


def test_parse_record_unparsable_date_gets_huge_delay():
    out = parse_record(RawRow("CD456", "", "Bole, Addis Ababa"), dt.date(2024, 1, 10))
    assert isinstance(out, NormalizedRecord)
    assert out.parsed_date == EPOCH_DATE
    assert out.delay_days == (dt.date(2024, 1, 10) - EPOCH_DATE).days
    assert out.city == "Addis Ababa"


def test_parse_record_drops_row_on_unexpected_failure():
    # a non-text plate cannot be trimmed
    assert parse_record(RawRow(None, "01/01/2024", "Adama"), dt.date(2024, 1, 10)) is DROPPED


def test_parse_record_uses_given_rules():
    row = RawRow("P1", "01/01/2024", "Bole, Addis Ababa, Ethiopia")
    assert parse_record(row, dt.date(2024, 1, 2)).city == "Addis Ababa"
    assert parse_record(row, dt.date(2024, 1, 2), rules=SIMPLE_RULES).city == "Ethiopia"


def test_parse_records_filters_dropped_and_logs_counts():
    rows = [
        RawRow("A", "01/01/2024", "Adama"),
        RawRow(None, "01/01/2024", "Adama"),
        RawRow("B", "", ""),
    ]
    logger = Logger()
    out = parse_records(rows, dt.date(2024, 1, 10), logger=logger)

    assert [r.license_plate for r in out] == ["A", "B"]
    assert out[1].city == "Unknown"
    assert logger.debugs == ["parse_records: 3 -> 2 (Δ -1)"]
    assert logger.messages == []

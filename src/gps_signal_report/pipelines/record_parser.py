# src/gps_signal_report/pipelines/record_parser.py
from __future__ import annotations

import datetime as dt
import math
from typing import Iterable, Optional

from gps_signal_report.models import (
    DROPPED,
    NormalizedRecord,
    ParseOutcome,
    RawRow,
)
from gps_signal_report.rules.city_extractor import RICH_RULES, CityRules, extract_city

INPUT_DATE_FMT = "%m/%d/%Y"
# Unparsable report dates fall back here so the vehicle ranks as maximally stale
EPOCH_DATE = dt.date(1970, 1, 1)

_ONE_DAY = dt.timedelta(days=1)


def parse_report_date(date_str: Optional[str]) -> dt.date:
    """
    Parse the leading `MM/dd/yyyy` token of a last-report timestamp
    ("01/31/2024 10:15:00" -> 2024-01-31). Empty or malformed -> EPOCH_DATE.
    """
    text = (date_str or "").strip()
    token = text.split()[0] if text else ""
    if not token:
        return EPOCH_DATE
    try:
        return dt.datetime.strptime(token, INPUT_DATE_FMT).date()
    except ValueError:
        return EPOCH_DATE


def _as_datetime(value: dt.date | dt.datetime) -> dt.datetime:
    if isinstance(value, dt.datetime):
        return value.replace(tzinfo=None)
    return dt.datetime.combine(value, dt.time.min)


def delay_in_days(now: dt.date | dt.datetime, parsed: dt.date) -> int:
    """Whole days from `parsed` (midnight) to `now`, truncated toward zero."""
    return math.trunc((_as_datetime(now) - _as_datetime(parsed)) / _ONE_DAY)


def parse_record(
    row: RawRow,
    now: dt.date | dt.datetime,
    *,
    rules: CityRules = RICH_RULES,
) -> ParseOutcome:
    """Normalize one raw row; any failure yields DROPPED instead of raising."""
    try:
        parsed = parse_report_date(row.date_str)
        return NormalizedRecord(
            license_plate=row.license_plate.strip(),
            parsed_date=parsed,
            delay_days=delay_in_days(now, parsed),
            city=extract_city(row.address, rules),
        )
    except Exception:
        return DROPPED


def parse_records(
    rows: Iterable[RawRow],
    now: dt.date | dt.datetime,
    *,
    rules: CityRules = RICH_RULES,
    logger=None,
) -> list[NormalizedRecord]:
    outcomes = [parse_record(r, now, rules=rules) for r in rows]
    records = [o for o in outcomes if isinstance(o, NormalizedRecord)]
    if logger:
        logger.debug("parse_records: %d -> %d (Δ %d)", len(outcomes),
                     len(records), len(records) - len(outcomes))
    return records

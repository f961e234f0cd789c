# src/gps_signal_report/rules/classifier.py
from __future__ import annotations

import unicodedata
from typing import Iterable

from gps_signal_report.models import Classification, LostEntry, NormalizedRecord
from gps_signal_report.rules.city_extractor import UNKNOWN_CITY

DATE_FMT = "%m/%d/%Y"


def city_sort_key(city: str) -> tuple[str, str]:
    """
    Collation key for city names: accents and case ignored, raw text as the
    tie-break so the order stays total and independent of the process locale.
    """
    decomposed = unicodedata.normalize("NFKD", city)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), city


def is_lost(record: NormalizedRecord, threshold: float) -> bool:
    """Lost means delay >= threshold; everything else is live."""
    return record.delay_days >= threshold


def rank_lost(records: Iterable[NormalizedRecord]) -> tuple[LostEntry, ...]:
    # sorted() is stable: equal delays keep their input order
    ordered = sorted(records, key=lambda r: r.delay_days, reverse=True)
    return tuple(
        LostEntry(
            rank=i,
            license_plate=r.license_plate,
            date=r.parsed_date.strftime(DATE_FMT),
            city=r.city,
            delay_days=r.delay_days,
        )
        for i, r in enumerate(ordered, start=1)
    )


def group_by_city(records: Iterable[NormalizedRecord]) -> dict[str, list[str]]:
    groups: dict[str, list[str]] = {}
    for r in records:
        groups.setdefault(r.city or UNKNOWN_CITY, []).append(r.license_plate)
    return {city: groups[city] for city in sorted(groups, key=city_sort_key)}


def classify(records: Iterable[NormalizedRecord], threshold: float) -> Classification:
    """
    Split records into ranked lost entries and live plates grouped by city.

    The partition is exclusive: a delay exactly equal to the threshold is lost.
    """
    lost: list[NormalizedRecord] = []
    recent: list[NormalizedRecord] = []
    for r in records:
        (lost if is_lost(r, threshold) else recent).append(r)

    return Classification(
        lost=rank_lost(lost),
        recent_groups=group_by_city(recent),
        recent_count=len(recent),
    )

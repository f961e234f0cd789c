from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from types import MappingProxyType
from typing import Any, Mapping, Union


@dataclass(frozen=True)
class RawRow:
    """One positional row from the uploaded sheet (plate, last report, address)."""
    license_plate: str
    date_str: str
    address: str


@dataclass(frozen=True)
class NormalizedRecord:
    license_plate: str
    parsed_date: date
    delay_days: int
    city: str


class Dropped:
    """Outcome of a row whose derivation failed; filtered out downstream."""

    _instance: "Dropped | None" = None

    def __new__(cls) -> "Dropped":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "DROPPED"


DROPPED = Dropped()

ParseOutcome = Union[NormalizedRecord, Dropped]


@dataclass(frozen=True)
class LostEntry:
    rank: int
    license_plate: str
    date: str          # MM/dd/yyyy
    city: str
    delay_days: int

    def to_dict(self) -> dict[str, Any]:
        """Wire shape consumed by the report viewer."""
        return {
            "number": self.rank,
            "license_plate": self.license_plate,
            "date": self.date,
            "address": self.city,
            "delay": self.delay_days,
        }


@dataclass(frozen=True)
class Classification:
    lost: tuple[LostEntry, ...]
    recent_groups: Mapping[str, tuple[str, ...]]
    recent_count: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "lost", tuple(self.lost))
        object.__setattr__(self, "recent_groups", MappingProxyType(
            {city: tuple(plates) for city, plates in self.recent_groups.items()}))

    @property
    def lost_count(self) -> int:
        return len(self.lost)

    @property
    def total(self) -> int:
        return self.recent_count + self.lost_count

# src/gps_signal_report/rules/city_extractor.py
from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN_CITY = "Unknown"
DJIBOUTI = "Djibouti"
EXPRESSWAY = "Addis–Adama Expressway"
KOMBOLCHA = "Kombolcha"

# -------- Lookup tables (lowercased inputs) --------

# Amharic-script city names seen in GPS exports -> Latin canonical name
AMHARIC_CITY_NAMES: Mapping[str, str] = MappingProxyType({
    "አዲስ አበባ": "Addis Ababa",
    "ኣዳማ": "Adama",
    "ጅጅጋ": "Jijiga",
    "ኮምቦልቻ": "Kombolcha",
})

# (pattern, replacement); applied in order, case-insensitive
_SPELLING_SUBSTITUTIONS: tuple[tuple[str, str], ...] = (
    (r"adiss\s*-\s*adama expy|addis\s*-\s*adama expy|addis\s*-\s*adama|adis\s*-\s*adama",
     "addis–adama expressway"),
    (r"kembolcha", "kombolcha"),
)

# Landmarks/offices that say nothing about the city
_NOISE_PHRASES: tuple[str, ...] = (
    "emergency relief head office",
    "adama garage",
    "awel building",
    "senegal st",
    "unnamed road",
    "addis - wonje road",
)

_PLUS_CODE = re.compile(r"\b[a-z0-9]{4}\+[a-z0-9]{2,}\b", re.IGNORECASE)
_ROAD_CODE_PREFIX = re.compile(
    r"^(?:a\d+a?|rn\d+|n\d+|b\d+|d\d+|e\d+)\b\s*,?", re.IGNORECASE)
_COMMA_SPACING = re.compile(r"\s*,\s*")
_WHITESPACE = re.compile(r"\s+")
_EDGE_COMMAS = re.compile(r"^[,\s]+|[,\s]+$")

_EXPRESSWAY_MARKER = re.compile(r"expressway|expy", re.IGNORECASE)
_KOMBOLCHA_MARKER = re.compile(r"kombolcha", re.IGNORECASE)

_SKIP_PARTS: frozenset[str] = frozenset({"ethiopia", "unknown"})


@dataclass(frozen=True)
class CityRules:
    """
    The normalization policy used by extract_city().

    - substitutions: regex -> canonical token rewrites (spelling variants)
    - noise_phrases: literal phrases removed before splitting
    - strip_road_codes: drop a leading highway code such as "A1," or "RN4"
    - script_names: lowercased non-Latin city name -> canonical name
    - scan_from_end: take the last part that is not a country token; when
      False the last part is taken as-is
    """
    substitutions: tuple[tuple[str, str], ...] = _SPELLING_SUBSTITUTIONS
    noise_phrases: tuple[str, ...] = _NOISE_PHRASES
    strip_road_codes: bool = True
    script_names: Mapping[str, str] = field(
        default_factory=lambda: AMHARIC_CITY_NAMES)
    scan_from_end: bool = True

    def with_script_names(self, extra: Mapping[str, str]) -> "CityRules":
        merged = dict(self.script_names)
        merged.update({k.lower(): v for k, v in extra.items()})
        return replace(self, script_names=MappingProxyType(merged))


RICH_RULES = CityRules()
SIMPLE_RULES = CityRules(noise_phrases=(), scan_from_end=False)


# ---- Helpers -----------------------------------------------------------------


def _apply_substitutions(text: str, rules: CityRules) -> str:
    for pattern, repl in rules.substitutions:
        text = re.sub(pattern, repl, text, flags=re.IGNORECASE)
    return text


def _strip_plus_codes(text: str) -> str:
    """Remove Open Location Codes ("8FQX+2V ..."), then any stray '+'."""
    return _PLUS_CODE.sub("", text).replace("+", " ")


def _strip_noise(text: str, rules: CityRules) -> str:
    for phrase in rules.noise_phrases:
        text = re.sub(re.escape(phrase), "", text, flags=re.IGNORECASE)
    return text


def _tidy(text: str) -> str:
    text = _COMMA_SPACING.sub(",", text)
    text = _WHITESPACE.sub(" ", text).strip()
    return _EDGE_COMMAS.sub("", text)


def normalize_address(address: str, rules: CityRules = RICH_RULES) -> str:
    """
    Lowercased, cleaned address (steps before the city pick).
    Exposed separately so the cleanup can be inspected on its own.
    """
    addr = (address or "").lower().strip()
    addr = _apply_substitutions(addr, rules)
    addr = _strip_plus_codes(addr)
    addr = _strip_noise(addr, rules)
    if rules.strip_road_codes:
        addr = _ROAD_CODE_PREFIX.sub("", addr.strip())
    return _tidy(addr)


def split_parts(normalized: str) -> list[str]:
    return [p.strip() for p in normalized.split(",") if p.strip()]


def title_case(text: str) -> str:
    """Capitalize the first letter of each space-separated word, lowercase the rest."""
    return " ".join(w[:1].upper() + w[1:].lower() for w in text.split(" "))


def _pick_part(parts: list[str], rules: CityRules) -> Optional[str]:
    if not parts:
        return None
    if not rules.scan_from_end:
        return parts[-1]
    for part in reversed(parts):
        if part and part not in _SKIP_PARTS:
            return part
    return None


def extract_city(address: Optional[str], rules: CityRules = RICH_RULES) -> str:
    """
    Derive a canonical city name from a free-text GPS address.

    Never raises and never returns an empty string; "Unknown" is the fallback.
    Addresses are written most specific first, so the city is looked for at
    the end of the comma-separated parts.
    """
    if address is None or not str(address).strip():
        return UNKNOWN_CITY

    lowered = str(address).lower().strip()
    if "djibouti" in lowered:
        return DJIBOUTI

    normalized = normalize_address(lowered, rules)
    part = _pick_part(split_parts(normalized), rules)

    city = UNKNOWN_CITY
    if part:
        city = title_case(rules.script_names.get(part, part)) or UNKNOWN_CITY

    # The canonical expressway token anywhere beats the trailing landmark
    if _EXPRESSWAY_MARKER.search(city) or EXPRESSWAY.lower() in normalized:
        return EXPRESSWAY
    if _KOMBOLCHA_MARKER.search(city):
        return KOMBOLCHA
    return city

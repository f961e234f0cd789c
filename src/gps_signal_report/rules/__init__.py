from .city_extractor import (
    AMHARIC_CITY_NAMES,
    CityRules,
    RICH_RULES,
    SIMPLE_RULES,
    UNKNOWN_CITY,
    extract_city,
)
from .classifier import classify

__all__ = [
    "AMHARIC_CITY_NAMES",
    "CityRules",
    "RICH_RULES",
    "SIMPLE_RULES",
    "UNKNOWN_CITY",
    "extract_city",
    "classify",
]

from .records import (
    RawRow,
    NormalizedRecord,
    Dropped,
    DROPPED,
    ParseOutcome,
    LostEntry,
    Classification,
)
from .layout import CellValue, MergeRegion, ColumnWidth, LayoutGrid
from .report_cfg import ReportCfg

__all__ = [
    "RawRow",
    "NormalizedRecord",
    "Dropped",
    "DROPPED",
    "ParseOutcome",
    "LostEntry",
    "Classification",
    "CellValue",
    "MergeRegion",
    "ColumnWidth",
    "LayoutGrid",
    "ReportCfg",
]

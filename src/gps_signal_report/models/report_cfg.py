from __future__ import annotations
from dataclasses import dataclass


@dataclass(frozen=True)
class ReportCfg:
    """Header text and defaults for a generated report (see get_report_env())."""
    title: str = "Vehicle status from GPS"
    recipients: tuple[str, ...] = ("General Manager", "Freight Transport Director")
    sheet_name: str = "Sheet1"
    threshold_days: float = 2

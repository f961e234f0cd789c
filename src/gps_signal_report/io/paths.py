from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import Tuple

REPORT_SUFFIX = "_report.xlsx"
JSON_SUFFIX = "_report.json"


def derive_output_paths(input_file: Path) -> Tuple[Path, Path, Path]:
    """
    Given an input Excel path, return (report_xlsx_path, report_json_path, log_path)
    in the same directory.

    Raises FileNotFoundError if input_file doesn't exist (explicit early signal for CLI).
    """
    p = Path(input_file)
    if not p.exists():
        raise FileNotFoundError(p)

    stem = p.stem
    report = p.with_name(f"{stem}{REPORT_SUFFIX}")
    payload = p.with_name(f"{stem}{JSON_SUFFIX}")
    log = p.with_suffix(".log")
    return report, payload, log


def download_name(generated_on: dt.date) -> str:
    """File name offered when the report is downloaded from the upload endpoint."""
    return f"customized_report_{generated_on:%Y-%m-%d}.xlsx"

from __future__ import annotations

import base64
import datetime as dt
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence

from gps_signal_report.io.paths import download_name
from gps_signal_report.io.workbook_writer import render_workbook, workbook_to_bytes
from gps_signal_report.models import Classification, LayoutGrid, RawRow, ReportCfg
from gps_signal_report.pipelines.layout_engine import lay_out
from gps_signal_report.pipelines.preprocessor import Preprocessor, WorkbookSource
from gps_signal_report.pipelines.record_parser import parse_records
from gps_signal_report.rules.city_extractor import RICH_RULES, CityRules
from gps_signal_report.rules.classifier import classify


@dataclass(frozen=True)
class Report:
    classification: Classification
    grid: LayoutGrid
    generated_at: dt.datetime
    workbook: bytes

    @property
    def generated_on(self) -> dt.date:
        return self.generated_at.date()

    def to_payload(self, *, include_workbook: bool = True) -> dict[str, Any]:
        """JSON-ready response body: lost list, live groups, workbook (+ file name), date."""
        payload: dict[str, Any] = {
            "lost": [e.to_dict() for e in self.classification.lost],
            "groups": {city: list(plates) for city, plates in self.classification.recent_groups.items()},
        }
        if include_workbook:
            payload["excelBase64"] = base64.b64encode(self.workbook).decode("ascii")
            payload["downloadName"] = download_name(self.generated_on)
        payload["generatedAt"] = self.generated_on.isoformat()
        return payload


class ReportGenerator:
    """Orchestrates reading, record parsing, classification, layout and rendering."""

    def __init__(
        self,
        logger,
        *,
        threshold_days: Optional[float] = None,
        cfg: Optional[ReportCfg] = None,
        reference_now: dt.datetime | dt.date | None = None,
        rules: CityRules = RICH_RULES,
    ) -> None:
        self.logger = logger
        self.cfg = cfg or ReportCfg()
        self.threshold_days = (
            self.cfg.threshold_days if threshold_days is None else threshold_days
        )
        self.reference_now = reference_now
        self.rules = rules

    def _now(self) -> dt.datetime:
        now = self.reference_now or dt.datetime.now()
        if isinstance(now, dt.datetime):
            return now
        return dt.datetime.combine(now, dt.time.min)

    def generate(self, source: WorkbookSource) -> Report:
        rows = Preprocessor(logger=self.logger).read(source)
        return self.build(rows)

    def build(self, rows: Sequence[RawRow]) -> Report:
        now = self._now()

        records = parse_records(rows, now, rules=self.rules, logger=self.logger)
        result = classify(records, self.threshold_days)
        if self.logger:
            self.logger.info(
                "classify (threshold=%s): lost=%d live=%d cities=%d",
                self.threshold_days, result.lost_count, result.recent_count,
                len(result.recent_groups),
            )

        grid = lay_out(result.lost, result.recent_groups, now.date(), header=self.cfg)
        workbook = workbook_to_bytes(render_workbook(grid, self.cfg.sheet_name))
        if self.logger:
            self.logger.debug("layout: %d cells, %d merges, %d sized columns",
                              len(grid.cells), len(grid.merges), len(grid.widths))

        return Report(classification=result, grid=grid, generated_at=now, workbook=workbook)

    def process(
        self,
        input_path: Path,
        report_path: Path,
        json_path: Optional[Path] = None,
    ) -> dict[str, Any]:
        input_path = Path(input_path)
        report_path = Path(report_path)

        if not input_path.exists():
            self.logger.error("Input file does not exist: %s", input_path)
            raise FileNotFoundError(input_path)

        report = self.generate(input_path)

        report_path.parent.mkdir(parents=True, exist_ok=True)
        report_path.write_bytes(report.workbook)
        self.logger.info("Wrote report workbook → %s", report_path)

        if json_path is not None:
            json_path = Path(json_path)
            json_path.write_text(
                json.dumps(report.to_payload(include_workbook=False),
                           ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            self.logger.info("Wrote report JSON → %s", json_path)

        return {
            "output_path": str(report_path),
            "json_path": str(json_path) if json_path is not None else None,
            "generated_at": report.generated_on.isoformat(),
            "lost_count": report.classification.lost_count,
            "live_count": report.classification.recent_count,
        }

# src/gps_signal_report/api/handler.py
from __future__ import annotations

import datetime as dt
from typing import Any, Optional, Tuple

from gps_signal_report.config.env import parse_threshold
from gps_signal_report.models import ReportCfg
from gps_signal_report.pipelines.report_generator import ReportGenerator

NO_FILE_MESSAGE = "No file uploaded"
BAD_THRESHOLD_MESSAGE = "Invalid threshold value"
FALLBACK_ERROR_MESSAGE = "Internal server error during Excel generation"


class ReportRequestError(Exception):
    """A rejected upload; `status_code` is the HTTP status to answer with."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def validate_request(file_bytes: Optional[bytes], threshold: Any) -> Tuple[bytes, float]:
    if not file_bytes:
        raise ReportRequestError(NO_FILE_MESSAGE)
    if threshold is None or (isinstance(threshold, str) and not threshold.strip()):
        raise ReportRequestError(BAD_THRESHOLD_MESSAGE)
    try:
        return bytes(file_bytes), parse_threshold(threshold)
    except (TypeError, ValueError) as e:
        raise ReportRequestError(BAD_THRESHOLD_MESSAGE) from e


def handle_report_request(
    file_bytes: Optional[bytes],
    threshold: Any,
    *,
    logger,
    now: dt.datetime | dt.date | None = None,
    cfg: Optional[ReportCfg] = None,
) -> Tuple[int, dict[str, Any]]:
    """
    Upload entry point for a web layer: (file, threshold) -> (status, JSON body).

    400 for a missing file or a non-numeric threshold, 500 (with the error
    message) for anything that fails while building the report.
    """
    try:
        data, threshold_days = validate_request(file_bytes, threshold)
    except ReportRequestError as e:
        logger.warning("Rejected report request: %s", e.message)
        return e.status_code, {"error": e.message}

    try:
        report = ReportGenerator(
            logger,
            threshold_days=threshold_days,
            cfg=cfg,
            reference_now=now,
        ).generate(data)
    except Exception as e:
        logger.exception("Report processing error: %s", e)
        return 500, {"error": str(e) or FALLBACK_ERROR_MESSAGE}

    return 200, report.to_payload()

# src/gps_signal_report/cli.py
from __future__ import annotations

import argparse
import datetime as dt
import sys
from pathlib import Path

from .config.logging_config import get_logger
from .config.env import EnvError, get_report_env, parse_threshold
from .io.paths import derive_output_paths
from .pipelines.report_generator import ReportGenerator


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="gps-signal-report",
        description="Split a GPS check-in export into lost/live vehicles and emit a *_report.xlsx next to the input.",
    )
    p.add_argument("input", type=Path, help="Path to input .xlsx file.")
    p.add_argument(
        "--threshold",
        default=None,
        help="Days without a report after which a vehicle counts as lost. "
             "Default: GPS_THRESHOLD_DAYS or 2.",
    )
    p.add_argument(
        "--reference-date",
        type=str,
        default=None,
        help="YYYY-MM-DD date to measure delays from (default: now).",
    )
    p.add_argument(
        "--no-json",
        action="store_true",
        help="Do not write the *_report.json payload.",
    )
    p.add_argument(
        "--no-console",
        action="store_true",
        help="Disable console logging (file logging remains).",
    )
    p.add_argument(
        "--log-level",
        default="INFO",
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: INFO",
    )
    return p


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        report_path, json_path, log_path = derive_output_paths(args.input)
    except FileNotFoundError:
        print(f"error: input file not found: {args.input}", file=sys.stderr)
        return 2

    logger = get_logger(
        "gps_signal_report",
        level=args.log_level,
        console=not args.no_console,
        log_file=log_path,
    )
    logger.info("Input: %s", args.input)
    logger.info("Report output: %s", report_path)
    logger.info("Log file: %s", log_path)

    try:
        cfg = get_report_env()
    except EnvError as e:
        logger.error("Environment error: %s", e)
        return 2

    threshold = cfg.threshold_days
    if args.threshold is not None:
        try:
            threshold = parse_threshold(args.threshold)
        except ValueError:
            logger.error("Invalid --threshold: %s (expected a number of days)", args.threshold)
            return 2

    reference_date = None
    if args.reference_date:
        try:
            reference_date = dt.date.fromisoformat(args.reference_date)
        except ValueError:
            logger.error(
                "Invalid --reference-date: %s (expected YYYY-MM-DD)", args.reference_date)
            return 2

    try:
        generator = ReportGenerator(
            logger,
            threshold_days=threshold,
            cfg=cfg,
            reference_now=reference_date,
        )
        generator.process(
            args.input,
            report_path,
            None if args.no_json else json_path,
        )
    except FileNotFoundError as e:
        logger.error("Input missing: %s", e)
        return 2
    except Exception as e:
        logger.exception("Failed to generate report: %s", e)
        return 1

    logger.info("Done.")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())

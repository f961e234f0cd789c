# src/gps_signal_report/config/env.py
from __future__ import annotations

import math
import os
from pathlib import Path
from typing import Dict, Optional, Tuple

from gps_signal_report.models import ReportCfg

try:
    from dotenv import load_dotenv, find_dotenv  # type: ignore
except Exception as e:  # pragma: no cover
    raise RuntimeError(
        "Missing dependency 'python-dotenv'. Install it with:\n"
        "  pip install python-dotenv"
    ) from e


# --- Public contract ---------------------------------------------------------

class EnvError(RuntimeError):
    """Raised when report settings in the environment are unusable."""


THRESHOLD_KEY = "GPS_THRESHOLD_DAYS"
TITLE_KEY = "GPS_REPORT_TITLE"
RECIPIENTS_KEY = "GPS_REPORT_RECIPIENTS"
SHEET_KEY = "GPS_REPORT_SHEET"

REPORT_KEYS: Tuple[str, ...] = (THRESHOLD_KEY, TITLE_KEY, RECIPIENTS_KEY, SHEET_KEY)


def load_project_dotenv(start: Optional[Path] = None, *, override: bool = False) -> Path:
    """
    Load variables from the nearest `.env` file (searching upward from `start` or CWD).
    Does NOT override existing env vars unless `override=True`.
    Returns the resolved Path to the .env file if found; otherwise Path().
    """
    start_path = Path.cwd() if start is None else Path(start)

    dotenv_str = find_dotenv(filename=".env", usecwd=True)
    dotenv_path = Path(dotenv_str) if dotenv_str else Path()

    if not dotenv_str:
        for p in (start_path, *start_path.parents):
            candidate = p / ".env"
            if candidate.exists():
                dotenv_path = candidate
                break

    if not dotenv_path.exists() or dotenv_path.is_dir():
        return Path()

    load_dotenv(dotenv_path=dotenv_path, override=override)
    return dotenv_path.resolve()


def env(name: str, *, default: Optional[str] = None, required: bool = False, cast=None):
    """
    Test-friendly accessor.

    - If `required=True` and var is missing, raise KeyError(name).
    - If `cast` is provided, apply it to the raw string and propagate cast errors.
    - Returns `default` when missing and not required.
    """
    raw = os.getenv(name)
    if raw is None or raw == "":
        if required:
            raise KeyError(name)
        return default

    if cast is not None:
        return cast(raw)
    return raw


def parse_threshold(raw) -> float:
    """
    Numeric threshold in days. Accepts ints, floats and numeric strings;
    raises ValueError for anything else (including NaN).
    """
    if raw is None or isinstance(raw, bool):
        raise ValueError(f"invalid threshold: {raw!r}")
    value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
    if math.isnan(value):
        raise ValueError(f"invalid threshold: {raw!r}")
    return value


def _split_recipients(raw: str) -> Tuple[str, ...]:
    return tuple(p.strip() for p in raw.split(";") if p.strip())


def load_env(dotenv_path: Optional[Path] = None, *, override: bool = False) -> Dict[str, str]:
    """
    Load a .env file into the process environment and return the report keys
    that are set afterwards.

    - If `dotenv_path` is provided, load exactly that file.
    - Otherwise, auto-discover the nearest .env via `load_project_dotenv`.
    """
    if dotenv_path:
        path = Path(dotenv_path)
        if path.exists():
            load_dotenv(dotenv_path=path, override=override)
    else:
        load_project_dotenv(override=override)

    return {k: os.environ[k] for k in REPORT_KEYS if os.getenv(k)}


def get_report_env(dotenv_path: Path | str | None = ".env") -> ReportCfg:
    """
    Build the report settings from the environment (after loading `.env`).

    Unset keys keep the ReportCfg defaults. An unparsable threshold raises
    EnvError so a misconfigured deployment fails loudly at startup.
    """
    load_env(Path(dotenv_path) if dotenv_path else None, override=False)
    defaults = ReportCfg()

    try:
        threshold = env(THRESHOLD_KEY, default=defaults.threshold_days,
                        cast=parse_threshold)
    except ValueError as e:
        raise EnvError(f"{THRESHOLD_KEY} must be numeric: {e}") from e

    recipients = env(RECIPIENTS_KEY, default=None, cast=_split_recipients)

    return ReportCfg(
        title=env(TITLE_KEY, default=defaults.title),
        recipients=recipients or defaults.recipients,
        sheet_name=env(SHEET_KEY, default=defaults.sheet_name),
        threshold_days=threshold,
    )


__all__ = [
    "EnvError",
    "REPORT_KEYS",
    "load_project_dotenv",
    "load_env",
    "env",
    "parse_threshold",
    "get_report_env",
]

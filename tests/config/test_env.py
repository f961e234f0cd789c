# tests/config/test_env.py

import os

import pytest

from gps_signal_report.config.env import (
    REPORT_KEYS,
    EnvError,
    env as env_get,
    get_report_env,
    load_env,
    parse_threshold,
)
from gps_signal_report.models import ReportCfg


@pytest.fixture(autouse=True)
def _clean_report_env(monkeypatch, tmp_path):
    # isolate from any developer .env and from values loaded by earlier tests
    for k in REPORT_KEYS:
        monkeypatch.delenv(k, raising=False)
    monkeypatch.chdir(tmp_path)


def _write_env_file(dirpath, text=""):
    f = dirpath / ".env"
    f.write_text(text)
    return f


def test_defaults_without_any_configuration(tmp_path):
    cfg = get_report_env(dotenv_path=None)
    assert cfg == ReportCfg()
    assert cfg.threshold_days == 2
    assert cfg.recipients == ("General Manager", "Freight Transport Director")


def test_values_are_read_from_dotenv_file(tmp_path):
    f = _write_env_file(
        tmp_path,
        "GPS_THRESHOLD_DAYS=7\n"
        "GPS_REPORT_TITLE=Fleet status\n"
        "GPS_REPORT_RECIPIENTS=Ops Lead; Dispatch ;\n"
        "GPS_REPORT_SHEET=GPS\n",
    )
    cfg = get_report_env(f)

    assert cfg.threshold_days == 7.0
    assert cfg.title == "Fleet status"
    assert cfg.recipients == ("Ops Lead", "Dispatch")
    assert cfg.sheet_name == "GPS"


def test_process_env_wins_over_dotenv(tmp_path, monkeypatch):
    f = _write_env_file(tmp_path, "GPS_THRESHOLD_DAYS=7\n")
    monkeypatch.setenv("GPS_THRESHOLD_DAYS", "3")

    assert get_report_env(f).threshold_days == 3.0


def test_default_dotenv_path_is_relative_to_cwd(tmp_path):
    _write_env_file(tmp_path, "GPS_REPORT_TITLE=From cwd\n")
    assert get_report_env().title == "From cwd"


def test_non_numeric_threshold_raises_env_error(monkeypatch):
    monkeypatch.setenv("GPS_THRESHOLD_DAYS", "two")
    with pytest.raises(EnvError):
        get_report_env(dotenv_path=None)


def test_load_env_returns_report_keys_that_are_set(tmp_path):
    f = _write_env_file(tmp_path, "GPS_REPORT_TITLE=T\nOTHER=1\n")
    loaded = load_env(f)
    assert loaded == {"GPS_REPORT_TITLE": "T"}
    assert os.environ["GPS_REPORT_TITLE"] == "T"


def test_env_accessor_required_and_cast(monkeypatch):
    monkeypatch.delenv("GSR_TEST_VAR", raising=False)
    with pytest.raises(KeyError):
        env_get("GSR_TEST_VAR", required=True)
    assert env_get("GSR_TEST_VAR", default="d") == "d"

    monkeypatch.setenv("GSR_TEST_VAR", "42")
    assert env_get("GSR_TEST_VAR", cast=int) == 42


@pytest.mark.parametrize("raw, expected", [("5", 5.0), (" 2.5 ", 2.5), (0, 0.0), (3.5, 3.5), ("-1", -1.0)])
def test_parse_threshold_accepts_numbers(raw, expected):
    assert parse_threshold(raw) == expected


@pytest.mark.parametrize("raw", [None, "", "abc", "nan", True])
def test_parse_threshold_rejects_non_numbers(raw):
    with pytest.raises(ValueError):
        parse_threshold(raw)

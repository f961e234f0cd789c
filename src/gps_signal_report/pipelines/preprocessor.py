# src/gps_signal_report/pipelines/preprocessor.py
from __future__ import annotations

import datetime as dt
import io
from pathlib import Path
from typing import BinaryIO, Union

import pandas as pd

from gps_signal_report.io.schema import INPUT_COLUMNS
from gps_signal_report.models import RawRow

WorkbookSource = Union[str, Path, bytes, bytearray, BinaryIO]


def read_first_sheet(source: WorkbookSource) -> pd.DataFrame:
    """
    Load the first sheet as raw positional cells, skipping the header row.
    All cells stay as objects and literal text such as "NA" is kept as written;
    text coercion happens in Preprocessor.
    """
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(bytes(source))
    return pd.read_excel(
        source,
        sheet_name=0,
        header=None,
        skiprows=1,
        dtype=object,
        engine="openpyxl",
        keep_default_na=False,
    )


def _cell_text(v) -> str:
    """Cell value -> text as it reads in the sheet ('' for blanks)."""
    if v is None:
        return ""
    if isinstance(v, float) and pd.isna(v):
        return ""
    if v is pd.NaT:
        return ""
    if isinstance(v, (dt.datetime, pd.Timestamp)):
        # real Excel dates; render in the export's own MM/dd/yyyy style
        return v.strftime("%m/%d/%Y %H:%M:%S")
    if isinstance(v, dt.date):
        return v.strftime("%m/%d/%Y")
    if isinstance(v, float) and v.is_integer():
        # numeric plates come back as 12345.0
        return str(int(v))
    return str(v)


class Preprocessor:
    """Turns the uploaded sheet into RawRow objects (three positional columns)."""

    def __init__(self, logger=None) -> None:
        self.logger = logger

    def _log_delta(self, label: str, before: int, after: int) -> None:
        if self.logger:
            self.logger.info("%s: %d -> %d (Δ %d)", label,
                             before, after, after - before)

    def _take_columns(self, df: pd.DataFrame) -> pd.DataFrame:
        width = len(INPUT_COLUMNS)
        out = df.iloc[:, :width].copy()
        # short sheets: pad the missing positional columns with blanks
        for i in range(out.shape[1], width):
            out[i] = ""
        out.columns = list(INPUT_COLUMNS)
        return out.apply(lambda col: col.map(_cell_text))

    def _drop_blank_rows(self, df: pd.DataFrame) -> pd.DataFrame:
        blank = (df == "").all(axis=1)
        return df.loc[~blank]

    def prepare(self, df: pd.DataFrame) -> list[RawRow]:
        if df.empty:
            self._log_delta("drop_blank_rows", 0, 0)
            return []

        cols = self._take_columns(df)

        before = len(cols)
        cols = self._drop_blank_rows(cols)
        self._log_delta("drop_blank_rows", before, len(cols))

        return [
            RawRow(license_plate=plate, date_str=date_str, address=address)
            for plate, date_str, address in cols.itertuples(index=False, name=None)
        ]

    def read(self, source: WorkbookSource) -> list[RawRow]:
        return self.prepare(read_first_sheet(source))

# src/gps_signal_report/io/workbook_writer.py
from __future__ import annotations

import io
import warnings

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from gps_signal_report.models import LayoutGrid


def render_workbook(grid: LayoutGrid, sheet_name: str = "Sheet1") -> Workbook:
    """
    Apply a LayoutGrid to a fresh single-sheet workbook: values, merges and
    column widths exactly as given (grid indices are 0-based, openpyxl's 1-based).
    """
    wb = Workbook()
    ws = wb.active
    ws.title = sheet_name

    for (r, c), value in sorted(grid.cells.items()):
        ws.cell(row=r + 1, column=c + 1, value=value)

    # merge after writing so the top-left value survives
    for m in grid.merges:
        ws.merge_cells(
            start_row=m.start_row + 1,
            start_column=m.start_col + 1,
            end_row=m.end_row + 1,
            end_column=m.end_col + 1,
        )

    for w in grid.widths:
        ws.column_dimensions[get_column_letter(w.column + 1)].width = w.width

    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    buf = io.BytesIO()
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        wb.save(buf)
    return buf.getvalue()

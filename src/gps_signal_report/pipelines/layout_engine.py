# src/gps_signal_report/pipelines/layout_engine.py
from __future__ import annotations

import datetime as dt
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from gps_signal_report.io.schema import (
    LIVE_SECTION_TITLE,
    LOST_SECTION_TITLE,
    LOST_TABLE_HEADER,
    RECIPIENT_PREFIX,
    SUMMARY_TEMPLATE,
)
from gps_signal_report.models import (
    CellValue,
    ColumnWidth,
    LayoutGrid,
    LostEntry,
    MergeRegion,
    ReportCfg,
)

# A live block is two columns wide (index, plate) and at most this many rows tall
MAX_ROWS_PER_BLOCK = 41
BLOCK_WIDTH = 2
# Lost table starts this many columns right of the last live block's first column
LOST_TABLE_OFFSET = 4
# "Date dd/MM/yyyy" label sits this many columns right of the lost table start
DATE_LABEL_OFFSET = 4

MIN_COL_WIDTH = 10
MAX_COL_WIDTH = 40
COL_WIDTH_PADDING = 2

Cells = dict[tuple[int, int], CellValue]


@dataclass(frozen=True)
class LivePlacement:
    cells: Mapping[tuple[int, int], CellValue]
    merges: tuple[MergeRegion, ...]
    last_block_col: int
    last_row: Optional[int]   # None when there are no live groups


def data_start_row(header: ReportCfg) -> int:
    # title + recipients + blank spacer + section titles
    return 1 + len(header.recipients) + 2


def place_live_groups(groups: Mapping[str, Sequence[str]], start_row: int) -> LivePlacement:
    """
    Tile city groups into 2-column blocks, top to bottom then left to right.

    A group takes 1 + len(plates) rows plus one spacer row after it. A group
    that would push the block past MAX_ROWS_PER_BLOCK opens a new block two
    columns to the right; groups are never split across blocks.
    """
    cells: Cells = {}
    merges: list[MergeRegion] = []
    row, col = start_row, 0
    last_row: Optional[int] = None

    for city, plates in groups.items():
        group_rows = 1 + len(plates)
        if row > start_row and (row - start_row) + group_rows > MAX_ROWS_PER_BLOCK:
            col += BLOCK_WIDTH
            row = start_row

        cells[(row, col)] = city
        merges.append(MergeRegion(row, col, row, col + BLOCK_WIDTH - 1))
        for i, plate in enumerate(plates, start=1):
            cells[(row + i, col)] = i
            cells[(row + i, col + 1)] = plate

        group_end = row + len(plates)
        last_row = group_end if last_row is None else max(last_row, group_end)
        row += group_rows + 1

    return LivePlacement(cells=cells, merges=tuple(merges), last_block_col=col, last_row=last_row)


def place_lost_table(lost: Sequence[LostEntry], start_row: int, start_col: int) -> Cells:
    cells: Cells = {}
    rows: list[Sequence[CellValue]] = [LOST_TABLE_HEADER]
    rows += [(e.rank, e.license_plate, e.date, e.city, e.delay_days) for e in lost]
    for i, values in enumerate(rows):
        for j, v in enumerate(values):
            cells[(start_row + i, start_col + j)] = v
    return cells


def place_preamble(header: ReportCfg, lost_col: int, generated_on: dt.date) -> Cells:
    cells: Cells = {}
    for col in (0, lost_col):
        cells[(0, col)] = header.title
        for i, name in enumerate(header.recipients, start=1):
            cells[(i, col)] = f"{RECIPIENT_PREFIX}{name}"
    cells[(0, lost_col + DATE_LABEL_OFFSET)] = f"Date {generated_on:%d/%m/%Y}"

    titles_row = data_start_row(header) - 1
    cells[(titles_row, 0)] = LIVE_SECTION_TITLE
    cells[(titles_row, lost_col)] = LOST_SECTION_TITLE
    return cells


def summary_text(recent_count: int, lost_count: int) -> str:
    return SUMMARY_TEMPLATE.format(
        recent=recent_count, lost=lost_count, total=recent_count + lost_count)


def column_widths(cells: Mapping[tuple[int, int], CellValue]) -> tuple[ColumnWidth, ...]:
    longest: dict[int, int] = {}
    for (_, c), v in cells.items():
        if v is None or v == "":
            continue
        longest[c] = max(longest.get(c, 0), len(str(v)))
    return tuple(
        ColumnWidth(c, min(max(n, MIN_COL_WIDTH) + COL_WIDTH_PADDING, MAX_COL_WIDTH))
        for c, n in sorted(longest.items())
    )


def lay_out(
    lost: Sequence[LostEntry],
    recent_groups: Mapping[str, Sequence[str]],
    generated_on: dt.date,
    *,
    header: Optional[ReportCfg] = None,
) -> LayoutGrid:
    """
    Build the single-sheet report: preamble, live blocks on the left, the lost
    table to their right, and a summary line below both.
    """
    header = header or ReportCfg()
    start_row = data_start_row(header)

    live = place_live_groups(recent_groups, start_row)
    lost_col = live.last_block_col + LOST_TABLE_OFFSET

    cells: Cells = {}
    cells.update(place_preamble(header, lost_col, generated_on))
    cells.update(live.cells)
    cells.update(place_lost_table(lost, start_row, lost_col))

    recent_count = sum(len(p) for p in recent_groups.values())
    lost_last_row = start_row + len(lost)
    summary_row = lost_last_row + 3
    if live.last_row is not None:
        summary_row = max(summary_row, live.last_row + 2)
    cells[(summary_row, 0)] = summary_text(recent_count, len(lost))

    return LayoutGrid(cells=cells, merges=live.merges, widths=column_widths(cells))

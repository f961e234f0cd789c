from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional, Union

CellValue = Union[str, int]


@dataclass(frozen=True)
class MergeRegion:
    """Inclusive, 0-based rectangle of cells merged into one."""
    start_row: int
    start_col: int
    end_row: int
    end_col: int


@dataclass(frozen=True)
class ColumnWidth:
    column: int   # 0-based
    width: int


@dataclass(frozen=True)
class LayoutGrid:
    """
    Sparse sheet description handed to the workbook writer.

    `cells` maps (row, col) -> value; both indices are 0-based. Empty cells
    are simply absent.
    """
    cells: Mapping[tuple[int, int], CellValue]
    merges: tuple[MergeRegion, ...] = ()
    widths: tuple[ColumnWidth, ...] = ()

    def __post_init__(self) -> None:
        # Detach from the caller's dict so the grid cannot change afterwards.
        object.__setattr__(self, "cells", MappingProxyType(dict(self.cells)))
        object.__setattr__(self, "merges", tuple(self.merges))
        object.__setattr__(self, "widths", tuple(self.widths))

    def value_at(self, row: int, col: int) -> Optional[CellValue]:
        return self.cells.get((row, col))

    @property
    def n_rows(self) -> int:
        return max((r for r, _ in self.cells), default=-1) + 1

    @property
    def n_cols(self) -> int:
        return max((c for _, c in self.cells), default=-1) + 1

    def width_of(self, col: int) -> Optional[int]:
        for w in self.widths:
            if w.column == col:
                return w.width
        return None

    def to_rows(self) -> list[list[CellValue]]:
        """Dense list-of-lists view ("" for empty cells), handy for previews and tests."""
        rows = [["" for _ in range(self.n_cols)] for _ in range(self.n_rows)]
        for (r, c), v in self.cells.items():
            rows[r][c] = v
        return rows

#!/usr/bin/env python3
# Copyright (C) 2026 Alex Stoyanov
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along with this program.
# If not, see <https://www.gnu.org/licenses/>.

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from ..core.errors import LayoutInvariantError
from ..layout.blocks import KEY_ID_LABEL, Block, BlockKind
from ..layout.types import Column, RowGroup, SheetLayout

GRID10_DIGITS = "0123456789"
GRID36_ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ"
GRID36_CYCLE = 5
GRID36_SEPARATOR_MARK = "-"


class CellKind(str, Enum):
    HEADER = "header"
    DATA = "data"
    LABEL = "label"
    MARGIN = "margin"
    BLANK = "blank"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class Cell:
    text: str = ""
    colspan: int = 1
    rowspan: int = 1
    kind: CellKind = CellKind.BLANK


@dataclass(frozen=True)
class SheetRow:
    cells: tuple[Cell, ...]
    is_header: bool = False


def render_rows(layout: SheetLayout, *, classify_header_rows: bool = True) -> list[SheetRow]:
    """Emit one table row per height unit of every row group.

    Every row covers exactly layout.table_width columns once cells spanning
    down from earlier rows are counted.
    """
    rows = [
        _render_row(layout, group, offset, classify_header_rows=classify_header_rows)
        for group in layout.rows
        for offset in range(group.height)
    ]
    for index, covered in enumerate(row_coverage(rows)):
        if covered != layout.table_width:
            raise LayoutInvariantError(
                f"rendered row {index} covers {covered} columns, expected {layout.table_width}"
            )
    return rows


def row_coverage(rows: Sequence[SheetRow]) -> list[int]:
    """Columns covered by each row, including rowspans carried from above."""
    coverage: list[int] = []
    carried: list[tuple[int, int]] = []
    for row in rows:
        covered = sum(span for _, span in carried)
        covered += sum(cell.colspan for cell in row.cells)
        coverage.append(covered)
        carried = [(left - 1, span) for left, span in carried if left > 1]
        carried.extend((cell.rowspan - 1, cell.colspan) for cell in row.cells if cell.rowspan > 1)
    return coverage


def _render_row(
    layout: SheetLayout,
    group: RowGroup,
    offset: int,
    *,
    classify_header_rows: bool,
) -> SheetRow:
    cells: list[Cell] = []
    is_header = False
    for column in group.columns:
        located = _block_at(layout, column, offset)
        if located is None:
            cells.append(_blank(column.width))
            continue
        block, local = located
        if local == 0:
            is_header = True
        cells.extend(_block_cells(block, local))
        if column.width > block.width:
            cells.append(_blank(column.width - block.width))
    if layout.table_width > group.width:
        cells.append(_blank(layout.table_width - group.width))
    return SheetRow(cells=tuple(cells), is_header=classify_header_rows and is_header)


def _block_at(layout: SheetLayout, column: Column, offset: int) -> tuple[Block, int] | None:
    top = 0
    for block_id in column.block_ids:
        block = layout.block(block_id)
        if top <= offset < top + block.height:
            return block, offset - top
        top += block.height
    return None


def _blank(width: int) -> Cell:
    return Cell(colspan=width, kind=CellKind.BLANK)


def _block_cells(block: Block, local: int) -> list[Cell]:
    cells: list[Cell] = []
    if block.margin_left:
        cells.append(Cell(colspan=block.margin_left, kind=CellKind.MARGIN))
    if local == 0:
        cells.append(Cell(text=block.header, colspan=block.content_width, kind=CellKind.HEADER))
    else:
        cells.extend(_data_cells(block, local))
    if block.margin_right:
        cells.append(Cell(colspan=block.margin_right, kind=CellKind.MARGIN))
    return cells


def _data_cells(block: Block, local: int) -> list[Cell]:
    if block.kind is BlockKind.TEXT:
        if local != 1:
            raise LayoutInvariantError(
                f"text block '{block.key}' has no data row at offset {local}"
            )
        return [Cell(text=char, kind=CellKind.DATA) for char in block.data]
    if block.kind is BlockKind.GRID10:
        return [Cell(text=digit, kind=CellKind.DATA) for digit in GRID10_DIGITS]
    if block.kind is BlockKind.GRID36:
        return _grid36_cells(local)
    return _key_id_cells(block, local)


def _grid36_cells(local: int) -> list[Cell]:
    if local % GRID36_CYCLE == GRID36_CYCLE - 1:
        return [
            Cell(text=GRID36_SEPARATOR_MARK, kind=CellKind.LABEL),
            Cell(colspan=len(GRID36_ALPHABET), kind=CellKind.SEPARATOR),
        ]
    # Row labels skip the separator rows above this one.
    ordinal = local - 1 - local // GRID36_CYCLE
    label = GRID36_ALPHABET[ordinal % len(GRID36_ALPHABET)]
    cells = [Cell(text=label, kind=CellKind.LABEL)]
    cells.extend(Cell(text=symbol, kind=CellKind.DATA) for symbol in GRID36_ALPHABET)
    return cells


def _key_id_cells(block: Block, local: int) -> list[Cell]:
    key_id = block.key_id
    if key_id is None:
        raise LayoutInvariantError(f"key-id block '{block.key}' has no identifier")
    label_width = len(KEY_ID_LABEL)
    if not block.compact:
        if local != 1:
            raise LayoutInvariantError(
                f"key-id block '{block.key}' has no data row at offset {local}"
            )
        cells = [Cell(text=KEY_ID_LABEL, colspan=label_width, kind=CellKind.LABEL)]
        cells.extend(Cell(text=digit, kind=CellKind.DATA) for digit in key_id)
        return cells
    half = len(key_id) // 2
    if local == 1:
        cells = [Cell(text=KEY_ID_LABEL, colspan=label_width, rowspan=2, kind=CellKind.LABEL)]
        cells.extend(Cell(text=digit, kind=CellKind.DATA) for digit in key_id[:half])
        return cells
    if local == 2:
        return [Cell(text=digit, kind=CellKind.DATA) for digit in key_id[half:]]
    raise LayoutInvariantError(f"compact key-id block '{block.key}' has no row at offset {local}")


__all__ = ["Cell", "CellKind", "SheetRow", "render_rows", "row_coverage"]

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

from ..core.errors import LayoutInvariantError
from .blocks import Block


@dataclass(frozen=True)
class Column:
    block_ids: tuple[int, ...]
    width: int
    height: int


@dataclass(frozen=True)
class RowGroup:
    height: int = 0
    columns: tuple[Column, ...] = ()

    @property
    def width(self) -> int:
        return sum(column.width for column in self.columns)

    @property
    def is_empty(self) -> bool:
        return not self.columns

    def block_ids(self) -> list[int]:
        """Block ids left to right, top to bottom."""
        return [block_id for column in self.columns for block_id in column.block_ids]


@dataclass(frozen=True)
class Placement:
    key: str
    top: int
    left: int
    width: int
    height: int
    compact: bool = False


@dataclass(frozen=True)
class SheetLayout:
    table_width: int
    blocks: tuple[Block, ...]
    rows: tuple[RowGroup, ...]

    @property
    def height(self) -> int:
        return sum(row.height for row in self.rows)

    def block(self, block_id: int) -> Block:
        return self.blocks[block_id]

    def placements(self) -> list[Placement]:
        """Absolute position of every block, in input order."""
        placements: list[Placement] = []
        top = 0
        for row in self.rows:
            left = 0
            for column in row.columns:
                offset = 0
                for block_id in column.block_ids:
                    block = self.blocks[block_id]
                    placements.append(
                        Placement(
                            key=block.key,
                            top=top + offset,
                            left=left,
                            width=block.width,
                            height=block.height,
                            compact=block.compact,
                        )
                    )
                    offset += block.height
                left += column.width
            top += row.height
        return placements

    def verify(self) -> None:
        """Check the packing invariants, raising LayoutInvariantError on a defect."""
        placed: list[int] = []
        for index, row in enumerate(self.rows):
            if row.is_empty:
                raise LayoutInvariantError(f"row group {index} is empty")
            if row.width > self.table_width:
                raise LayoutInvariantError(
                    f"row group {index} has width {row.width} > table width {self.table_width}"
                )
            for column in row.columns:
                blocks = [self.blocks[block_id] for block_id in column.block_ids]
                if column.height != sum(block.height for block in blocks):
                    raise LayoutInvariantError(f"row group {index} has a stale column height")
                if column.width != max(block.width for block in blocks):
                    raise LayoutInvariantError(f"row group {index} has a stale column width")
                if column.height > row.height:
                    raise LayoutInvariantError(
                        f"row group {index} has a column taller than the row ({column.height}"
                        f" > {row.height})"
                    )
            placed.extend(row.block_ids())
        if placed != list(range(len(self.blocks))):
            raise LayoutInvariantError("blocks were dropped, duplicated or reordered")


__all__ = ["Column", "Placement", "RowGroup", "SheetLayout"]

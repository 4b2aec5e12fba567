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

from dataclasses import replace
from typing import Callable, Sequence

from ..core.errors import LayoutInvariantError
from .blocks import Block
from .types import Column, RowGroup, SheetLayout

__all__ = ["PackingContext", "add", "pack_blocks", "rebuild"]


class PackingContext:
    """Block arena for a single sheet's layout.

    Row groups and columns refer to blocks by id (their input position). The
    compaction step swaps blocks through this arena so every row group sees
    the same geometry.
    """

    def __init__(self, blocks: Sequence[Block]) -> None:
        self._blocks = list(blocks)

    def __len__(self) -> int:
        return len(self._blocks)

    def ids(self) -> range:
        return range(len(self._blocks))

    def block(self, block_id: int) -> Block:
        return self._blocks[block_id]

    def replace(self, block_id: int, block: Block) -> Block:
        """Swap in a new value for block_id and return the previous one."""
        previous = self._blocks[block_id]
        if previous.key != block.key:
            raise LayoutInvariantError(
                f"cannot replace block {previous.key!r} with {block.key!r}"
            )
        self._blocks[block_id] = block
        return previous

    def snapshot(self) -> tuple[Block, ...]:
        return tuple(self._blocks)


_Step = Callable[[PackingContext, RowGroup, int, int], "RowGroup | None"]


def _place(
    ctx: PackingContext,
    group: RowGroup,
    block_id: int,
    table_width: int,
) -> RowGroup | None:
    """Place a block without changing the row height."""
    block = ctx.block(block_id)
    if block.height > group.height:
        return None
    if group.columns:
        last = group.columns[-1]
        widened = max(last.width, block.width)
        if (
            last.height + block.height <= group.height
            and group.width - last.width + widened <= table_width
        ):
            column = Column(
                block_ids=last.block_ids + (block_id,),
                width=widened,
                height=last.height + block.height,
            )
            return replace(group, columns=group.columns[:-1] + (column,))
    if group.width + block.width <= table_width:
        column = Column(block_ids=(block_id,), width=block.width, height=block.height)
        return replace(group, columns=group.columns + (column,))
    return None


def add(
    ctx: PackingContext,
    group: RowGroup,
    block_id: int,
    table_width: int,
) -> RowGroup | None:
    """Return group with block_id added, or None when it does not fit.

    The input group is never modified.
    """
    block = ctx.block(block_id)
    if group.is_empty:
        if block.width > table_width:
            return None
        column = Column(block_ids=(block_id,), width=block.width, height=block.height)
        return RowGroup(height=block.height, columns=(column,))
    if block.height > group.height:
        return rebuild(ctx, group.block_ids(), block_id, table_width, height=block.height)
    return _place(ctx, group, block_id, table_width)


def rebuild(
    ctx: PackingContext,
    block_ids: Sequence[int],
    new_id: int,
    table_width: int,
    *,
    height: int | None = None,
) -> RowGroup | None:
    """Replay block_ids followed by new_id into a fresh row group.

    With a height the replay keeps that height fixed; without one every block
    goes through add() and the row may grow.
    """
    step: _Step = add if height is None else _place
    group = RowGroup(height=height or 0)
    for block_id in (*block_ids, new_id):
        placed = step(ctx, group, block_id, table_width)
        if placed is None:
            return None
        group = placed
    return group


def _compaction_candidate(ctx: PackingContext, group: RowGroup) -> int | None:
    if group.is_empty:
        return None
    last = group.columns[-1]
    if len(last.block_ids) != 1:
        return None
    block = ctx.block(last.block_ids[0])
    if not block.can_compact or block.width != last.width:
        return None
    return last.block_ids[0]


def _add_with_compaction(
    ctx: PackingContext,
    group: RowGroup,
    block_id: int,
    table_width: int,
) -> RowGroup | None:
    """Retry add() after shrinking a lone key-id block at the end of the row.

    The shrink is rolled back unless the whole row rebuilds with the new block.
    """
    candidate = _compaction_candidate(ctx, group)
    if candidate is None:
        return None
    original = ctx.replace(candidate, ctx.block(candidate).compacted())
    rebuilt: RowGroup | None = None
    try:
        rebuilt = rebuild(ctx, group.block_ids(), block_id, table_width)
    finally:
        if rebuilt is None:
            ctx.replace(candidate, original)
    return rebuilt


def pack_blocks(blocks: Sequence[Block], table_width: int) -> SheetLayout:
    """Pack blocks, in order, into row groups no wider than table_width."""
    ctx = PackingContext(blocks)
    rows: list[RowGroup] = []
    current = RowGroup()
    for block_id in ctx.ids():
        placed = add(ctx, current, block_id, table_width)
        if placed is None:
            placed = _add_with_compaction(ctx, current, block_id, table_width)
        if placed is None:
            if not current.is_empty:
                rows.append(current)
            placed = add(ctx, RowGroup(), block_id, table_width)
            if placed is None:
                block = ctx.block(block_id)
                raise LayoutInvariantError(
                    f"block '{block.key}' (width {block.width}) does not fit an empty row"
                    f" of width {table_width}"
                )
        current = placed
    if not current.is_empty:
        rows.append(current)
    return SheetLayout(table_width=table_width, blocks=ctx.snapshot(), rows=tuple(rows))

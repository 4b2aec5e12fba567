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

from typing import Sequence

from .blocks import Block
from .types import Placement


def flow_layout(blocks: Sequence[Block], table_width: int) -> list[Placement]:
    """Place blocks left to right, wrapping when the cursor would pass table_width.

    A wrapped line starts below the tallest block of the previous line. No
    column stacking or compaction is attempted.
    """
    placements: list[Placement] = []
    cursor_left = 0
    cursor_top = 0
    line_height = 0
    for block in blocks:
        if cursor_left + block.width > table_width:
            cursor_top += line_height
            cursor_left = 0
            line_height = 0
        placements.append(
            Placement(
                key=block.key,
                top=cursor_top,
                left=cursor_left,
                width=block.width,
                height=block.height,
                compact=block.compact,
            )
        )
        cursor_left += block.width
        line_height = max(line_height, block.height)
    return placements


__all__ = ["flow_layout"]

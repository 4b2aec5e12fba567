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
from typing import Sequence

from .core.errors import LayoutInvariantError, SheetValidationError
from .layout.blocks import SizingProfile, build_blocks
from .layout.flow import flow_layout
from .layout.packing import pack_blocks
from .layout.types import Placement, SheetLayout
from .render.cells import SheetRow, render_rows
from .sheet.document import SheetSpec


@dataclass(frozen=True)
class RenderedSheet:
    title_left: str
    title_right: str
    table_width: int
    layout: SheetLayout
    rows: tuple[SheetRow, ...]


def layout_sheet(spec: SheetSpec) -> SheetLayout:
    """Build blocks for one sheet and pack them; each call gets its own block arena."""
    blocks = build_blocks(spec.blocks, spec.table_width, profile=SizingProfile.PACKED)
    layout = pack_blocks(blocks, spec.table_width)
    layout.verify()
    return layout


def flow_sheet(spec: SheetSpec) -> list[Placement]:
    blocks = build_blocks(spec.blocks, spec.table_width, profile=SizingProfile.FLOW)
    return flow_layout(blocks, spec.table_width)


def render_sheet(spec: SheetSpec, *, classify_header_rows: bool = True) -> RenderedSheet:
    layout = layout_sheet(spec)
    rows = render_rows(layout, classify_header_rows=classify_header_rows)
    return RenderedSheet(
        title_left=spec.title_left,
        title_right=spec.title_right,
        table_width=spec.table_width,
        layout=layout,
        rows=tuple(rows),
    )


def build_sheets(
    specs: Sequence[SheetSpec],
    *,
    classify_header_rows: bool = True,
) -> list[RenderedSheet]:
    """Render every sheet or none: the first failure aborts with the sheet index."""
    sheets: list[RenderedSheet] = []
    for index, spec in enumerate(specs):
        try:
            sheets.append(render_sheet(spec, classify_header_rows=classify_header_rows))
        except (SheetValidationError, LayoutInvariantError) as exc:
            if len(specs) == 1:
                raise
            raise type(exc)(f"sheet {index}: {exc}") from exc
    return sheets


__all__ = [
    "RenderedSheet",
    "build_sheets",
    "flow_sheet",
    "layout_sheet",
    "render_sheet",
]

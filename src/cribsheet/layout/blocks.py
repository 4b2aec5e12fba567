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

import re
from dataclasses import dataclass, replace
from enum import Enum
from typing import Iterable

from ..core.errors import SheetValidationError

KEY_ID_KEY = "keyid"
KEY_ID_LABEL = "0x"
KEY_ID_HEX_DIGITS = 16
KEY_ID_WIDTH = 18
KEY_ID_HEIGHT = 2
KEY_ID_COMPACT_WIDTH = 10
KEY_ID_COMPACT_HEIGHT = 3

GRID10_TOKEN = "grid10"
GRID36_TOKEN = "grid36"
GRID10_WIDTH = 10
GRID36_WIDTH = 37
TEXT_HEIGHT = 2

_KEY_ID_RE = re.compile(r"(?:0[xX])?([0-9a-fA-F]{16})")


class BlockKind(str, Enum):
    TEXT = "text"
    GRID10 = "grid10"
    GRID36 = "grid36"
    KEY_ID = "keyid"


class SizingProfile(str, Enum):
    """Grid heights differ between the packed sheet and the plain flow report."""

    PACKED = "packed"
    FLOW = "flow"


_GRID_HEIGHTS: dict[SizingProfile, dict[BlockKind, int]] = {
    SizingProfile.PACKED: {BlockKind.GRID10: 9, BlockKind.GRID36: 30},
    SizingProfile.FLOW: {BlockKind.GRID10: 11, BlockKind.GRID36: 31},
}


@dataclass(frozen=True)
class BlockSpec:
    key: str
    header: str
    data: str
    margin_left: int = 0
    margin_right: int = 0


@dataclass(frozen=True)
class Block:
    key: str
    header: str
    data: str
    kind: BlockKind
    content_width: int
    height: int
    margin_left: int = 0
    margin_right: int = 0
    key_id: str | None = None
    compact: bool = False

    @property
    def width(self) -> int:
        return self.content_width + self.margin_left + self.margin_right

    @property
    def can_compact(self) -> bool:
        return self.kind is BlockKind.KEY_ID and not self.compact

    def compacted(self) -> Block:
        if not self.can_compact:
            raise ValueError(f"block {self.key!r} has no compact form")
        return replace(
            self,
            content_width=KEY_ID_COMPACT_WIDTH,
            height=KEY_ID_COMPACT_HEIGHT,
            compact=True,
        )


def parse_key_id(data: str, *, key: str) -> str:
    """Return the 16 hex digits of a key identifier, upper-cased and without prefix."""
    match = _KEY_ID_RE.fullmatch(data.strip())
    if match is None:
        raise SheetValidationError(
            f"data.{key} must be {KEY_ID_HEX_DIGITS} hex digits (optionally prefixed with 0x),"
            f" got {data!r}"
        )
    return match.group(1).upper()


def block_kind(spec: BlockSpec) -> BlockKind:
    if spec.key == KEY_ID_KEY:
        return BlockKind.KEY_ID
    if spec.data == GRID36_TOKEN:
        return BlockKind.GRID36
    if spec.data == GRID10_TOKEN:
        return BlockKind.GRID10
    return BlockKind.TEXT


def build_block(
    spec: BlockSpec,
    table_width: int,
    *,
    profile: SizingProfile = SizingProfile.PACKED,
) -> Block:
    """Derive placement geometry for one block.

    Raises SheetValidationError for negative margins, malformed key
    identifiers, empty text and blocks wider than the table.
    """
    for side, value in (("left", spec.margin_left), ("right", spec.margin_right)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise SheetValidationError(
                f"margins.{spec.key}.{side} must be a non-negative integer, got {value!r}"
            )

    kind = block_kind(spec)
    key_id = None
    if kind is BlockKind.KEY_ID:
        key_id = parse_key_id(spec.data, key=spec.key)
        content_width, height = KEY_ID_WIDTH, KEY_ID_HEIGHT
    elif kind is BlockKind.GRID36:
        content_width, height = GRID36_WIDTH, _GRID_HEIGHTS[profile][kind]
    elif kind is BlockKind.GRID10:
        content_width, height = GRID10_WIDTH, _GRID_HEIGHTS[profile][kind]
    else:
        if not spec.data:
            raise SheetValidationError(f"data.{spec.key} must be a non-empty string")
        content_width, height = len(spec.data), TEXT_HEIGHT

    block = Block(
        key=spec.key,
        header=spec.header,
        data=spec.data,
        kind=kind,
        content_width=content_width,
        height=height,
        margin_left=spec.margin_left,
        margin_right=spec.margin_right,
        key_id=key_id,
    )
    if block.width > table_width:
        raise SheetValidationError(
            f"block '{spec.key}' has width {block.width} > table width {table_width}"
        )
    return block


def build_blocks(
    specs: Iterable[BlockSpec],
    table_width: int,
    *,
    profile: SizingProfile = SizingProfile.PACKED,
) -> list[Block]:
    return [build_block(spec, table_width, profile=profile) for spec in specs]


__all__ = [
    "Block",
    "BlockKind",
    "BlockSpec",
    "KEY_ID_KEY",
    "SizingProfile",
    "block_kind",
    "build_block",
    "build_blocks",
    "parse_key_id",
]

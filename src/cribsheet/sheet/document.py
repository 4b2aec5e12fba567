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

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..core.errors import SheetValidationError
from ..core.validation import (
    require_dict,
    require_key,
    require_non_negative_int,
    require_positive_int,
    require_str,
)
from ..layout.blocks import BlockSpec


@dataclass(frozen=True)
class SheetSpec:
    title_left: str
    title_right: str
    table_width: int
    blocks: tuple[BlockSpec, ...]


def load_document(path: str | Path) -> list[SheetSpec]:
    """Read and validate a sheet document from a JSON file."""
    path = Path(path)
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = json.load(handle)
        except json.JSONDecodeError as exc:
            raise SheetValidationError(f"{path}: invalid JSON: {exc}") from exc
    return parse_document(data)


def parse_document(data: object) -> list[SheetSpec]:
    """Accept a single sheet object or an array of sheet objects."""
    if isinstance(data, list):
        if not data:
            raise SheetValidationError("document must contain at least one sheet")
        return [parse_sheet(entry, prefix=f"[{index}]") for index, entry in enumerate(data)]
    return [parse_sheet(data)]


def parse_sheet(data: object, *, prefix: str = "") -> SheetSpec:
    root = require_dict(data, label=prefix or "document")

    def field(*parts: str) -> str:
        path = ".".join(parts)
        return f"{prefix}.{path}" if prefix else path

    title = require_dict(require_key(root, "title", label=prefix), label=field("title"))
    title_left = require_str(
        require_key(title, "left", label=field("title")), label=field("title", "left")
    )
    title_right = require_str(
        require_key(title, "right", label=field("title")), label=field("title", "right")
    )
    table = require_dict(require_key(root, "table", label=prefix), label=field("table"))
    table_width = require_positive_int(
        require_key(table, "width", label=field("table")), label=field("table", "width")
    )

    headers = require_dict(
        require_key(root, "data_headers", label=prefix), label=field("data_headers")
    )
    values = require_dict(require_key(root, "data", label=prefix), label=field("data"))
    margins = require_dict(require_key(root, "margins", label=prefix), label=field("margins"))

    blocks: list[BlockSpec] = []
    for key, header in headers.items():
        if key not in values:
            raise SheetValidationError(
                f"{field('data_headers')} key '{key}' is missing from {field('data')}"
            )
        if key not in margins:
            raise SheetValidationError(
                f"{field('data_headers')} key '{key}' is missing from {field('margins')}"
            )
        margin = require_dict(margins[key], label=field("margins", key))
        blocks.append(
            BlockSpec(
                key=key,
                header=require_str(header, label=field("data_headers", key)),
                data=require_str(values[key], label=field("data", key)),
                margin_left=_margin(margin, "left", label=field("margins", key, "left")),
                margin_right=_margin(margin, "right", label=field("margins", key, "right")),
            )
        )
    return SheetSpec(
        title_left=title_left,
        title_right=title_right,
        table_width=table_width,
        blocks=tuple(blocks),
    )


def _margin(margin: dict[str, Any], side: str, *, label: str) -> int:
    if side not in margin:
        return 0
    return require_non_negative_int(margin[side], label=label)


__all__ = ["SheetSpec", "load_document", "parse_document", "parse_sheet"]

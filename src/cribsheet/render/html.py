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

from ..config.loader import AppConfig
from ..service import RenderedSheet
from .templating import render_template

_PAGE_SIZES = {"A4": "A4", "LETTER": "letter"}


def sheet_context(sheets: Sequence[RenderedSheet], config: AppConfig) -> dict[str, object]:
    return {
        "sheets": list(sheets),
        "page_size": _PAGE_SIZES[config.page.size],
        "page_orientation": config.page.orientation,
        "cell_size_mm": config.render.cell_size_mm,
        "font_family": config.render.font_family,
    }


def render_sheets_html(sheets: Sequence[RenderedSheet], *, config: AppConfig) -> str:
    """Render every sheet into one HTML document; text is escaped by the template engine."""
    return render_template(config.render.template_path, sheet_context(sheets, config))

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

import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, cast

from .installer import DEFAULT_TEMPLATE_PATH, resolve_config_path

PAPER_SIZES = ("A4", "LETTER")
DEFAULT_PAPER_SIZE = "A4"
DEFAULT_CELL_SIZE_MM = 4.8
DEFAULT_FONT_FAMILY = "DejaVu Sans Mono, Menlo, Consolas, monospace"

Orientation = Literal["portrait", "landscape"]


@dataclass(frozen=True)
class PageSettings:
    size: str = DEFAULT_PAPER_SIZE
    orientation: Orientation = "portrait"


@dataclass(frozen=True)
class RenderSettings:
    template_path: Path = DEFAULT_TEMPLATE_PATH
    classify_header_rows: bool = True
    cell_size_mm: float = DEFAULT_CELL_SIZE_MM
    font_family: str = DEFAULT_FONT_FAMILY


@dataclass(frozen=True)
class UiDefaults:
    quiet: bool = False
    no_color: bool = False


@dataclass(frozen=True)
class AppConfig:
    path: Path | None = None
    page: PageSettings = field(default_factory=PageSettings)
    render: RenderSettings = field(default_factory=RenderSettings)
    ui: UiDefaults = field(default_factory=UiDefaults)


def load_app_config(path: str | Path | None = None) -> AppConfig:
    config_path = resolve_config_path(path)
    data = _load_toml(config_path)
    return AppConfig(
        path=config_path,
        page=_parse_page(_get_dict(data, "page")),
        render=_parse_render(_get_dict(data, "render"), base_dir=config_path.parent),
        ui=_parse_ui(_get_dict(data, "ui")),
    )


def _parse_page(cfg: dict[str, object]) -> PageSettings:
    size = _parse_optional_str(cfg.get("size"), field="page.size")
    size = (size or DEFAULT_PAPER_SIZE).upper()
    if size not in PAPER_SIZES:
        raise ValueError("page.size must be A4 or LETTER")
    orientation = (
        _parse_optional_str(cfg.get("orientation"), field="page.orientation") or "portrait"
    ).lower()
    if orientation not in {"portrait", "landscape"}:
        raise ValueError("page.orientation must be portrait or landscape")
    return PageSettings(size=size, orientation=cast(Orientation, orientation))


def _parse_render(cfg: dict[str, object], *, base_dir: Path) -> RenderSettings:
    template = _parse_optional_str(cfg.get("template"), field="render.template")
    template_path = DEFAULT_TEMPLATE_PATH
    if template:
        candidate = Path(template).expanduser()
        template_path = candidate if candidate.is_absolute() else base_dir / candidate
    cell_size = _parse_float(cfg.get("cell_size_mm"), field="render.cell_size_mm")
    if cell_size is None:
        cell_size = DEFAULT_CELL_SIZE_MM
    if cell_size <= 0:
        raise ValueError("render.cell_size_mm must be positive")
    return RenderSettings(
        template_path=template_path,
        classify_header_rows=_parse_bool(
            cfg.get("classify_header_rows"),
            field="render.classify_header_rows",
            default=True,
        ),
        cell_size_mm=cell_size,
        font_family=(
            _parse_optional_str(cfg.get("font_family"), field="render.font_family")
            or DEFAULT_FONT_FAMILY
        ),
    )


def _parse_ui(cfg: dict[str, object]) -> UiDefaults:
    return UiDefaults(
        quiet=_parse_bool(cfg.get("quiet"), field="ui.quiet", default=False),
        no_color=_parse_bool(cfg.get("no_color"), field="ui.no_color", default=False),
    )


def _load_toml(path: Path) -> dict[str, object]:
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ValueError(f"{path}: invalid TOML: {exc}") from exc


def _get_dict(data: dict[str, object], key: str) -> dict[str, object]:
    value = data.get(key)
    if isinstance(value, dict):
        return value
    return {}


def _parse_optional_str(value: object, *, field: str) -> str | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValueError(f"{field} must be a string")
    normalized = value.strip()
    return normalized or None


def _parse_bool(value: object, *, field: str, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        if value in (0, 1):
            return bool(value)
        raise ValueError(f"{field} must be a boolean")
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in {"1", "true", "yes", "on"}:
            return True
        if normalized in {"0", "false", "no", "off"}:
            return False
    raise ValueError(f"{field} must be a boolean")


def _parse_float(value: object, *, field: str) -> float | None:
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError as exc:
            raise ValueError(f"{field} must be a number") from exc
    raise ValueError(f"{field} must be a number")

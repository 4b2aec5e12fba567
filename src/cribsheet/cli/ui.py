#!/usr/bin/env python3
from __future__ import annotations

import sys
from typing import Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.theme import Theme

from ..layout.types import Placement

THEME = Theme(
    {
        "title": "bold cyan",
        "accent": "cyan",
        "success": "green",
        "warning": "yellow",
        "error": "red",
        "muted": "dim",
    }
)


def isatty(stream, fallback) -> bool:
    if stream is not None:
        try:
            return bool(stream.isatty())
        except (OSError, ValueError, AttributeError):
            return False
    return bool(getattr(fallback, "isatty", lambda: False)())


def _build_console(*, stderr: bool) -> Console:
    raw = sys.__stderr__ if stderr else sys.__stdout__
    fallback = sys.stderr if stderr else sys.stdout
    return Console(stderr=stderr, theme=THEME, force_terminal=isatty(raw, fallback))


console = _build_console(stderr=False)
console_err = _build_console(stderr=True)


def configure_ui(*, no_color: bool) -> None:
    console.no_color = no_color
    console_err.no_color = no_color


def build_placement_table(
    placements: Sequence[Placement],
    *,
    title: str | None = None,
) -> Table:
    table = Table(title=title, box=box.SIMPLE, show_lines=False)
    table.add_column("Block", style="bold", no_wrap=True)
    table.add_column("Top", justify="right")
    table.add_column("Left", justify="right")
    table.add_column("Width", justify="right")
    table.add_column("Height", justify="right")
    table.add_column("Compact", justify="center")
    for placement in placements:
        table.add_row(
            placement.key,
            str(placement.top),
            str(placement.left),
            str(placement.width),
            str(placement.height),
            "yes" if placement.compact else "",
        )
    return table


def format_placement_line(placement: Placement) -> str:
    return (
        f"{placement.key}: top={placement.top} left={placement.left}"
        f" width={placement.width} height={placement.height}"
    )

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

import importlib.metadata
from collections.abc import Callable
from typing import Any

import typer
from rich.markup import escape
from rich.traceback import install as install_rich_traceback

from ...core.errors import LayoutInvariantError
from ..ui import console_err


def _run_cli(func: Callable[[], Any], *, debug: bool) -> None:
    if debug:
        install_rich_traceback(show_locals=True)
    try:
        result = func()
    except LayoutInvariantError as exc:
        if debug:
            raise
        console_err.print(f"[red]Internal error:[/red] {escape(str(exc))}")
        console_err.print(
            "[muted]This is a layout defect, not an input problem. Rerun with --debug.[/muted]"
        )
        raise typer.Exit(code=1)
    except (OSError, RuntimeError, ValueError, TypeError, LookupError) as exc:
        if debug:
            raise
        console_err.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(code=1)
    if isinstance(result, int) and result != 0:
        raise typer.Exit(code=result)


def _warn(message: str, *, quiet: bool) -> None:
    if quiet:
        return
    console_err.print(f"[yellow]Warning:[/yellow] {escape(message)}")


def _get_version() -> str:
    try:
        return importlib.metadata.version("cribsheet")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"

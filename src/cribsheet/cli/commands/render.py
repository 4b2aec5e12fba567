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

from pathlib import Path

import typer

from ...config import init_user_config, load_app_config
from ...render.html import render_sheets_html
from ...render.html_to_pdf import render_html_to_pdf
from ...service import build_sheets, flow_sheet, layout_sheet
from ...sheet.document import SheetSpec, load_document
from ..core.common import _get_version, _run_cli, _warn
from ..ui import (
    build_placement_table,
    configure_ui,
    console,
    console_err,
    format_placement_line,
)

_RENDER_HELP = (
    "Pack the blocks described in <basename>.json into a printable sheet.\n\n"
    "Examples:\n"
    "  cribsheet backup            writes backup.html\n"
    "  cribsheet backup --pdf      writes backup.pdf\n"
    "  cribsheet backup --layout   prints packed block positions\n"
)


def register(app: typer.Typer) -> None:
    app.command(help=_RENDER_HELP)(render)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"cribsheet {_get_version()}")
        raise typer.Exit()


def _init_config_callback(value: bool) -> None:
    if not value:
        return
    try:
        path = init_user_config()
    except OSError as exc:
        console_err.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"User config ready at {path}")
    raise typer.Exit()


def render(
    basename: str = typer.Argument(..., help="Input is read from <basename>.json."),
    config: str | None = typer.Option(
        None,
        "--config",
        help="Use this TOML config file.",
        rich_help_panel="Global",
    ),
    stdout: bool = typer.Option(
        False,
        "--stdout",
        help="Print the HTML instead of writing <basename>.html.",
        rich_help_panel="Outputs",
    ),
    pdf: bool = typer.Option(
        False,
        "--pdf",
        help="Write <basename>.pdf (requires a Playwright Chromium install).",
        rich_help_panel="Outputs",
    ),
    layout: bool = typer.Option(
        False,
        "--layout",
        help="Print packed block positions instead of rendering.",
        rich_help_panel="Inspect",
    ),
    positions: bool = typer.Option(
        False,
        "--positions",
        help="Print plain left-to-right flow positions instead of rendering.",
        rich_help_panel="Inspect",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        help="Hide non-error output.",
        rich_help_panel="Global",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output.",
        rich_help_panel="Global",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Show tracebacks instead of one-line errors.",
        rich_help_panel="Debug",
    ),
    init_config: bool = typer.Option(
        False,
        "--init-config",
        help="Copy the default config to the user config directory and exit.",
        callback=_init_config_callback,
        is_eager=True,
        rich_help_panel="Config",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
        rich_help_panel="Info",
    ),
) -> None:
    _ = (init_config, version)
    configure_ui(no_color=no_color)

    def _run() -> None:
        app_config = load_app_config(config)
        quiet_value = quiet or app_config.ui.quiet
        if app_config.ui.no_color:
            configure_ui(no_color=True)

        input_path = Path(f"{basename}.json")
        if not input_path.is_file():
            raise FileNotFoundError(f"Expected input file {input_path} does not exist.")
        specs = load_document(input_path)

        if positions:
            _print_flow_positions(specs)
            return
        if layout:
            _print_packed_layout(specs)
            return

        sheets = build_sheets(
            specs,
            classify_header_rows=app_config.render.classify_header_rows,
        )
        html = render_sheets_html(sheets, config=app_config)
        if pdf:
            if stdout:
                _warn("--stdout is ignored when --pdf is given", quiet=quiet_value)
            output_path = Path(f"{basename}.pdf")
            render_html_to_pdf(html, output_path)
        elif stdout:
            typer.echo(html, nl=False)
            return
        else:
            output_path = Path(f"{basename}.html")
            output_path.write_text(html, encoding="utf-8")
        if not quiet_value:
            console.print(str(output_path))

    _run_cli(_run, debug=debug)


def _print_flow_positions(specs: list[SheetSpec]) -> None:
    for index, spec in enumerate(specs):
        if index:
            console.print()
        console.print(f"title.left: {spec.title_left}", markup=False, highlight=False)
        console.print(f"title.right: {spec.title_right}", markup=False, highlight=False)
        console.print(f"table.width: {spec.table_width}", markup=False, highlight=False)
        console.print()
        for placement in flow_sheet(spec):
            console.print(format_placement_line(placement), markup=False, highlight=False)


def _print_packed_layout(specs: list[SheetSpec]) -> None:
    for spec in specs:
        sheet_layout = layout_sheet(spec)
        title = f"{spec.title_left} / {spec.title_right} ({len(sheet_layout.rows)} row groups)"
        console.print(build_placement_table(sheet_layout.placements(), title=title))

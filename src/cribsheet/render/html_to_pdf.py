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

import atexit
from pathlib import Path

from playwright.sync_api import Browser, Error as PlaywrightError, Playwright, sync_playwright

_PLAYWRIGHT: Playwright | None = None
_BROWSER: Browser | None = None


def _shutdown_playwright() -> None:
    global _BROWSER, _PLAYWRIGHT
    browser = _BROWSER
    playwright = _PLAYWRIGHT
    _BROWSER = None
    _PLAYWRIGHT = None
    if browser is not None:
        browser.close()
    if playwright is not None:
        playwright.stop()


def _get_browser() -> Browser:
    global _BROWSER, _PLAYWRIGHT
    if _BROWSER is not None:
        return _BROWSER
    _PLAYWRIGHT = sync_playwright().start()
    try:
        _BROWSER = _PLAYWRIGHT.chromium.launch()
    except PlaywrightError as exc:
        _PLAYWRIGHT.stop()
        _PLAYWRIGHT = None
        raise RuntimeError(
            f"unable to launch Chromium ({exc}); run `playwright install chromium`"
        ) from exc
    atexit.register(_shutdown_playwright)
    return _BROWSER


def render_html_to_pdf(html: str, output_path: str | Path) -> None:
    output_path = Path(output_path)
    browser = _get_browser()
    page = browser.new_page()
    try:
        page.set_content(html, wait_until="load")
        page.emulate_media(media="print")
        page.pdf(
            path=str(output_path),
            print_background=True,
            prefer_css_page_size=True,
        )
    except PlaywrightError as exc:
        raise RuntimeError(f"PDF rendering failed: {exc}") from exc
    finally:
        page.close()

import json
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from cribsheet.layout.blocks import BlockSpec, build_blocks
from cribsheet.layout.packing import pack_blocks
from cribsheet.layout.types import SheetLayout

# =============================================================================
# Test Constants
# =============================================================================

TEST_KEY_ID = "0x0123456789abcdef"
TEST_KEY_ID_DIGITS = "0123456789ABCDEF"


# =============================================================================
# Block Builders
# =============================================================================


def text_spec(key: str, width: int, *, header: str | None = None, fill: str = "x") -> BlockSpec:
    """Create a plain text block spec whose content is `width` characters wide."""
    return BlockSpec(key=key, header=header or key, data=fill * width)


def key_id_spec(data: str = TEST_KEY_ID, *, header: str = "Key ID") -> BlockSpec:
    return BlockSpec(key="keyid", header=header, data=data)


def grid_spec(key: str, token: str) -> BlockSpec:
    return BlockSpec(key=key, header=key, data=token)


def pack_specs(specs: list[BlockSpec], table_width: int) -> SheetLayout:
    return pack_blocks(build_blocks(specs, table_width), table_width)


def row_keys(layout: SheetLayout) -> list[list[list[str]]]:
    """Block keys per row group and column, for compact structural assertions."""
    return [
        [[layout.block(block_id).key for block_id in column.block_ids] for column in row.columns]
        for row in layout.rows
    ]


# =============================================================================
# Document Builders
# =============================================================================


def make_sheet_document(
    *,
    width: object = 40,
    headers: dict[str, str] | None = None,
    data: dict[str, str] | None = None,
    margins: dict[str, dict[str, object]] | None = None,
    title_left: str = "Left title",
    title_right: str = "Right title",
) -> dict[str, object]:
    if headers is None:
        headers = {"greeting": "Greeting"}
    if data is None:
        data = {"greeting": "HELLO"}
    if margins is None:
        margins = {key: {} for key in headers}
    return {
        "title": {"left": title_left, "right": title_right},
        "table": {"width": width},
        "data_headers": headers,
        "data": data,
        "margins": margins,
    }


# =============================================================================
# File System Helpers
# =============================================================================


@contextmanager
def temp_directory() -> Generator[Path, None, None]:
    """Create a temporary directory with cleanup."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@contextmanager
def temp_document(document: object, *, name: str = "sheet") -> Generator[Path, None, None]:
    """Write a JSON document and yield its basename (path without .json)."""
    with temp_directory() as tmp_path:
        base = tmp_path / name
        base.with_suffix(".json").write_text(json.dumps(document), encoding="utf-8")
        yield base

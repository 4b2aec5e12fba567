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

from typing import Any

from .errors import SheetValidationError


def require_dict(value: object, *, label: str) -> dict[str, Any]:
    """Validate that value is a JSON object."""
    if not isinstance(value, dict):
        raise SheetValidationError(f"{label} must be an object")
    return value


def require_str(value: object, *, label: str) -> str:
    """Validate that value is a JSON string."""
    if not isinstance(value, str):
        raise SheetValidationError(f"{label} must be a string")
    return value


def require_key(mapping: dict[str, Any], key: str, *, label: str) -> Any:
    """Return mapping[key], naming the full field path when it is missing."""
    if key not in mapping:
        path = f"{label}.{key}" if label else key
        raise SheetValidationError(f"{path} is required")
    return mapping[key]


def parse_int(value: object, *, label: str) -> int:
    """Coerce a JSON number or numeric string to int."""
    if isinstance(value, bool):
        raise SheetValidationError(f"{label} must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise SheetValidationError(f"{label} must be an integer, got {value!r}")
        return int(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            raise SheetValidationError(f"{label} must be an integer, got {value!r}")
        try:
            return int(text, 10)
        except ValueError as exc:
            raise SheetValidationError(f"{label} must be an integer, got {value!r}") from exc
    raise SheetValidationError(f"{label} must be an integer or integer string")


def require_positive_int(value: object, *, label: str) -> int:
    """Validate that value coerces to a positive integer (> 0)."""
    parsed = parse_int(value, label=label)
    if parsed <= 0:
        raise SheetValidationError(f"{label} must be a positive integer, got {parsed}")
    return parsed


def require_non_negative_int(value: object, *, label: str) -> int:
    """Validate that value coerces to a non-negative integer (>= 0)."""
    parsed = parse_int(value, label=label)
    if parsed < 0:
        raise SheetValidationError(f"{label} must be a non-negative integer, got {parsed}")
    return parsed

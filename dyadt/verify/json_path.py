"""
JSON path extraction and structural comparison for structured-content evidence.

Paths are dot-separated segments; each segment is an optional field name
followed by zero or more bracketed integer indices::

    .a.b[1]       -> document["a"]["b"][1]
    items[0][2]   -> document["items"][0][2]
    [3].name      -> document[3]["name"]
    ""            -> document

Empty segments (leading, trailing or doubled dots) are skipped. A missing
field, an out-of-range index, a malformed segment or a type mismatch all mean
the path does not resolve.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

_SEGMENT_RE = re.compile(r"^(?P<field>[^\[\]]*)(?P<indices>(?:\[\d+\])*)$")
_INDEX_RE = re.compile(r"\[(\d+)\]")


@dataclass(frozen=True)
class PathStep:
    """One navigation step: a field lookup or an array index."""

    field: str | None = None
    index: int | None = None


def parse_json_path(path: str) -> tuple[PathStep, ...] | None:
    """
    Split a JSON path into navigation steps.

    Args:
        path: Dotted/bracketed path expression

    Returns:
        The steps in order, or None if any segment is malformed
    """
    steps: list[PathStep] = []
    for segment in path.split("."):
        if segment == "":
            continue
        match = _SEGMENT_RE.match(segment)
        if match is None:
            return None
        field_name = match.group("field")
        if field_name:
            steps.append(PathStep(field=field_name))
        for raw_index in _INDEX_RE.findall(match.group("indices")):
            steps.append(PathStep(index=int(raw_index)))
    return tuple(steps)


def extract_json_path(document: Any, path: str) -> tuple[bool, Any]:
    """
    Resolve `path` against a parsed JSON document.

    Args:
        document: Parsed JSON value (dict, list, str, int, float, bool or None)
        path: Dotted/bracketed path expression

    Returns:
        `(True, value)` when the path resolves, `(False, None)` otherwise.
        A resolved value may itself be None (JSON null).

    Examples:
        >>> extract_json_path({"a": {"b": [10, 20, 30]}}, ".a.b[1]")
        (True, 20)
        >>> extract_json_path({"a": {"b": [10, 20, 30]}}, ".a.c")
        (False, None)
    """
    steps = parse_json_path(path)
    if steps is None:
        return False, None

    current = document
    for step in steps:
        if step.field is not None:
            if not isinstance(current, Mapping) or step.field not in current:
                return False, None
            current = current[step.field]
        else:
            if not isinstance(current, list):
                return False, None
            assert step.index is not None
            if step.index >= len(current):
                return False, None
            current = current[step.index]
    return True, current


def json_values_equal(left: Any, right: Any) -> bool:
    """
    Compare two JSON values structurally.

    Differs from Python `==` in one respect: booleans never equal numbers,
    so `true` does not match `1`. Integers and floats compare numerically.

    Args:
        left: Parsed JSON value
        right: Parsed JSON value

    Returns:
        True if both values denote the same JSON value
    """
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if isinstance(left, (int, float)) and isinstance(right, (int, float)):
        return left == right
    if isinstance(left, Mapping) and isinstance(right, Mapping):
        if left.keys() != right.keys():
            return False
        return all(json_values_equal(left[key], right[key]) for key in left)
    if isinstance(left, (list, tuple)) and isinstance(right, (list, tuple)):
        if len(left) != len(right):
            return False
        return all(json_values_equal(a, b) for a, b in zip(left, right))
    if left is None or right is None:
        return left is None and right is None
    if isinstance(left, str) and isinstance(right, str):
        return left == right
    return False

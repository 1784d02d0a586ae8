"""
JSON path resolution.

Addresses a position inside a parsed JSON tree with dotted keys and
bracket indices, e.g. ``weather[0].id``, ``rain.1h`` or ``main["temp"]``.
``$`` (or an empty path) addresses the root.

Resolution never raises on missing data: it returns Present(value) when
the path exists and Absent(reason) otherwise. Only a malformed path
string is an error, and that surfaces from parse_path() when an
expectation is constructed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

Segment = str | int

_TOKEN = re.compile(
    r"""
      (?P<name>[^.\[\]]+)
    | \[(?P<index>-?\d+)\]
    | \[(?P<quote>["'])(?P<key>.*?)(?P=quote)\]
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Present:
    """The path exists; value may be any JSON value including None (null)."""

    value: Any


@dataclass(frozen=True)
class Absent:
    """The path does not exist in the body."""

    reason: str


Resolution = Present | Absent


@lru_cache(maxsize=256)
def parse_path(path: str) -> tuple[Segment, ...]:
    """
    Split a path string into key (str) and index (int) segments.

    Dotted numeric segments are keys, so ``rain.1h`` and ``a.0`` address
    object keys; use brackets (``a[0]``) for array indices.

    Raises:
        ValueError: If the path is malformed.
    """
    text = path.strip()
    if text.startswith("$"):
        text = text[1:]
        if text.startswith("."):
            text = text[1:]
            if not text:
                raise ValueError(f"Invalid JSON path {path!r}: trailing '.'")

    segments: list[Segment] = []
    pos = 0
    while pos < len(text):
        after_dot = False
        if text[pos] == ".":
            if not segments:
                raise ValueError(f"Invalid JSON path {path!r}: leading '.'")
            pos += 1
            after_dot = True

        match = _TOKEN.match(text, pos)
        if match is None:
            raise ValueError(f"Invalid JSON path {path!r} at position {pos}")

        name = match.group("name")
        if name is not None:
            # a bare name must start the path or follow a dot
            if segments and not after_dot:
                raise ValueError(f"Invalid JSON path {path!r}: missing '.' before {name!r}")
            segments.append(name)
        elif after_dot:
            raise ValueError(f"Invalid JSON path {path!r}: '.' must be followed by a key")
        elif match.group("index") is not None:
            segments.append(int(match.group("index")))
        else:
            segments.append(match.group("key"))
        pos = match.end()

    return tuple(segments)


def format_path(segments: tuple[Segment, ...]) -> str:
    """Render segments back to dotted/bracket notation ('$' for the root)."""
    out = ""
    for segment in segments:
        if isinstance(segment, int):
            out += f"[{segment}]"
        elif out:
            out += f".{segment}"
        else:
            out = segment
    return out or "$"


def resolve(body: Any, path: str | tuple[Segment, ...]) -> Resolution:
    """Resolve a path against a parsed JSON body."""
    segments = parse_path(path) if isinstance(path, str) else path

    if body is None:
        return Absent("no JSON body")

    current = body
    for depth, segment in enumerate(segments):
        where = format_path(segments[:depth])
        if isinstance(segment, int):
            if not isinstance(current, list):
                return Absent(f"'{where}' is not an array")
            if not -len(current) <= segment < len(current):
                return Absent(f"index [{segment}] out of range at '{where}' (length {len(current)})")
            current = current[segment]
        else:
            if not isinstance(current, dict):
                return Absent(f"'{where}' is not an object")
            if segment not in current:
                return Absent(f"key '{segment}' not found at '{where}'")
            current = current[segment]

    return Present(current)

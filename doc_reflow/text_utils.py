"""Small composition and whitespace helpers shared by the pipeline stages."""

from __future__ import annotations

import re
from typing import Callable, TypeVar

T = TypeVar("T")

PREVIEW_LEN = 100

# Horizontal whitespace: every whitespace character except the line feed.
HSPACE = r"[^\S\n]"

BLANK_LINE_RE = re.compile(rf"\n{HSPACE}*\n")


def pipe(value: T, *funcs: Callable[[T], T]) -> T:
    """Left-to-right function composition for a single value."""
    for fn in funcs:
        value = fn(value)
    return value


def stabilize(value: T, transform: Callable[[T], T]) -> T:
    """Return ``value`` after repeatedly applying ``transform`` until stable."""

    updated = transform(value)
    while updated != value:
        value, updated = updated, transform(updated)
    return value


def preview(s: str, n: int = PREVIEW_LEN) -> str:
    """Return a safe preview slice for debug logs."""
    return repr(s[:n])


def normalize_newlines(text: str) -> str:
    """Convert CRLF/CR and unicode separators to LF."""
    return (
        text.replace("\r\n", "\n")
        .replace("\r", "\n")
        .replace("\u2028", "\n")
        .replace("\u2029", "\n")
    )

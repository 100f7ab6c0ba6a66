"""Spacing and punctuation normalization.

Rules run in a fixed order and the whole sequence is repeated until the text
stops changing, so ``align_text`` is idempotent. Rules that remove whitespace
only touch horizontal whitespace; paragraph breaks are capped, never merged.
"""

from __future__ import annotations

import logging
import re
from functools import partial
from typing import Callable, List, Tuple

from doc_reflow.errors import require_text
from doc_reflow.text_utils import HSPACE, normalize_newlines, pipe, preview, stabilize

logger = logging.getLogger(__name__)

CLOSING_PUNCTUATION = ",.;:!?，。、；：！？．"
OPENING_BRACKETS = "([{【〈《「『（［｛"
CLOSING_BRACKETS = ")]}】〉》」』）］｝"
LIST_BULLETS = "•·◦▪‣●"

_CLOSE_ESC = re.escape(CLOSING_PUNCTUATION)
_OPEN_BR_ESC = re.escape(OPENING_BRACKETS)
_CLOSE_BR_ESC = re.escape(CLOSING_BRACKETS)
_BULLETS_ESC = re.escape(LIST_BULLETS)

# Never add a space in front of something the other rules pull left.
_MARKER_FOLLOWER = rf"(?=[^\s{_CLOSE_ESC}{_CLOSE_BR_ESC}])"

SPACE_BEFORE_PUNCT_RE = re.compile(rf"{HSPACE}+(?=[{_CLOSE_ESC}])")
MISSING_SPACE_AFTER_PUNCT_RE = re.compile(rf"([{_CLOSE_ESC}])(?=[^\W\d_])")
SPACE_BEFORE_CLOSE_BRACKET_RE = re.compile(rf"{HSPACE}+(?=[{_CLOSE_BR_ESC}])")
SPACE_AFTER_OPEN_BRACKET_RE = re.compile(rf"(?<=[{_OPEN_BR_ESC}]){HSPACE}+")
EXCESS_BREAKS_RE = re.compile(rf"\n(?:{HSPACE}*\n){{2,}}")
NUMBERED_MARKER_RE = re.compile(
    rf"^{HSPACE}*(\d+[.)])(?!\d){HSPACE}*{_MARKER_FOLLOWER}", re.MULTILINE
)
BULLET_MARKER_RE = re.compile(
    rf"^{HSPACE}*([{_BULLETS_ESC}]){HSPACE}*{_MARKER_FOLLOWER}", re.MULTILINE
)
DASH_MARKER_RE = re.compile(rf"^{HSPACE}*([-*]){HSPACE}+(?=\S)", re.MULTILINE)
HSPACE_RUN_RE = re.compile(rf"{HSPACE}+")
LINE_EDGE_HSPACE_RE = re.compile(rf"{HSPACE}*\n{HSPACE}*")

Rule = Tuple[re.Pattern[str], str]

PUNCTUATION_RULES: Tuple[Rule, ...] = (
    (SPACE_BEFORE_PUNCT_RE, ""),
    (MISSING_SPACE_AFTER_PUNCT_RE, r"\1 "),
)
BRACKET_RULES: Tuple[Rule, ...] = (
    (SPACE_BEFORE_CLOSE_BRACKET_RE, ""),
    (SPACE_AFTER_OPEN_BRACKET_RE, ""),
)
LIST_RULES: Tuple[Rule, ...] = (
    (NUMBERED_MARKER_RE, r"\1 "),
    (BULLET_MARKER_RE, r"\1 "),
    (DASH_MARKER_RE, r"\1 "),
)


def _apply_rules(rules: Tuple[Rule, ...], text: str) -> str:
    for pattern, repl in rules:
        text = pattern.sub(repl, text)
    return text


fix_punctuation_spacing = partial(_apply_rules, PUNCTUATION_RULES)
fix_bracket_spacing = partial(_apply_rules, BRACKET_RULES)
normalize_list_markers = partial(_apply_rules, LIST_RULES)


def collapse_paragraph_breaks(text: str) -> str:
    """Cap runs of blank lines at one."""
    return EXCESS_BREAKS_RE.sub("\n\n", text)


def collapse_horizontal_whitespace(text: str) -> str:
    """Collapse space runs to one space and drop spaces at line edges."""
    return LINE_EDGE_HSPACE_RE.sub("\n", HSPACE_RUN_RE.sub(" ", text))


def is_uppercase_heading(line: str) -> bool:
    """Return ``True`` for lines made only of uppercase letters and spaces."""

    stripped = line.strip()
    return (
        len(stripped) >= 2
        and stripped.isupper()
        and all(ch.isalpha() or ch.isspace() for ch in stripped)
    )


def isolate_uppercase_headings(text: str) -> str:
    """Surround all-uppercase lines with blank lines."""

    lines = text.split("\n")
    out: List[str] = []
    for i, line in enumerate(lines):
        prev = lines[i - 1] if i else None
        needs_gap = bool(out and out[-1].strip() and line.strip()) and (
            is_uppercase_heading(line) or (prev is not None and is_uppercase_heading(prev))
        )
        if needs_gap:
            out.append("")
        out.append(line)
    return "\n".join(out)


def _identity(text: str) -> str:
    return text


def _align_once(text: str, headings: Callable[[str], str]) -> str:
    return pipe(
        text,
        normalize_newlines,
        fix_punctuation_spacing,
        fix_bracket_spacing,
        collapse_paragraph_breaks,
        normalize_list_markers,
        headings,
        collapse_horizontal_whitespace,
        str.strip,
    )


def align_text(text: str, *, isolate_uppercase: bool = True) -> str:
    """Normalize spacing around punctuation, brackets, lists and paragraphs."""

    require_text(text, "align_text")
    logger.debug("align_text called with %d chars", len(text))

    headings = isolate_uppercase_headings if isolate_uppercase else _identity
    result = stabilize(text, lambda value: _align_once(value, headings))

    logger.debug("align_text result preview: %s", preview(result))
    return result


__all__ = [
    "CLOSING_BRACKETS",
    "CLOSING_PUNCTUATION",
    "LIST_BULLETS",
    "OPENING_BRACKETS",
    "align_text",
    "collapse_horizontal_whitespace",
    "collapse_paragraph_breaks",
    "fix_bracket_spacing",
    "fix_punctuation_spacing",
    "is_uppercase_heading",
    "isolate_uppercase_headings",
    "normalize_list_markers",
]

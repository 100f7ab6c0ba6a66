"""paragraph_reflow

Rebuild paragraphs from line-broken extracted text.

Lines are classified one at a time (:mod:`doc_reflow.structure_detection`)
and consecutive prose lines are buffered and joined with single spaces.
Headings become standalone blocks; list items open a new paragraph that
continuation lines attach to. Blocks are separated by exactly one blank line.
"""

from __future__ import annotations

import logging
import re
from functools import reduce
from typing import Iterable, List, Optional, Sequence, Tuple

import ftfy
from wordfreq import zipf_frequency

from doc_reflow.errors import require_text
from doc_reflow.structure_detection import (
    DEFAULT_CLASSIFIER,
    LineClass,
    StructuralClassifier,
    StructuralKind,
)
from doc_reflow.text_utils import normalize_newlines, preview

logger = logging.getLogger(__name__)

BLOCK_SEPARATOR = "\n\n"

_HYPHEN_CHARS = "\u2010\u2011\u00ad-"
_HYPHENATED_TAIL_RE = re.compile(rf"([^\W\d_]+)[{re.escape(_HYPHEN_CHARS)}]$")
_LEADING_WORD_RE = re.compile(r"[^\W\d_]+")


# ---------------------------------------------------------------------------
# Hyphenation
# ---------------------------------------------------------------------------


def _hyphenation_scores(head: str, tail: str, language: str) -> Tuple[float, float]:
    """Return corpus frequencies for the joined and the hyphenated form."""

    joined_freq = zipf_frequency((head + tail).lower(), language)
    hyphen_freq = zipf_frequency(f"{head}-{tail}".lower(), language)
    return joined_freq, hyphen_freq


def _join_pair(acc: str, nxt: str, language: str) -> str:
    """Join ``nxt`` onto ``acc``, repairing a line-break hyphenation when plausible."""

    last_word = acc.rsplit(" ", 1)[-1]
    tail = _HYPHENATED_TAIL_RE.search(last_word)
    head = _LEADING_WORD_RE.match(nxt)
    if not tail or not head or not nxt[:1].islower():
        return f"{acc} {nxt}"

    joined_freq, hyphen_freq = _hyphenation_scores(tail.group(1), head.group(0), language)
    if hyphen_freq > joined_freq:
        return f"{acc}{nxt}"
    return f"{acc[:-1]}{nxt}"


def join_lines(
    lines: Sequence[str], *, dehyphenate: bool = False, language: str = "en"
) -> str:
    """Join trimmed paragraph lines with single spaces."""

    if not dehyphenate or len(lines) < 2:
        return " ".join(lines)
    return reduce(lambda acc, nxt: _join_pair(acc, nxt, language), lines[1:], lines[0])


# ---------------------------------------------------------------------------
# Block assembly
# ---------------------------------------------------------------------------


def reflow_blocks(
    lines: Iterable[str],
    *,
    classifier: Optional[StructuralClassifier] = None,
    preserve_original_line_breaks: bool = False,
    min_line_length: int = 0,
    dehyphenate: bool = False,
    language: str = "en",
) -> List[str]:
    """Group ``lines`` into output blocks in input order."""

    strategy = classifier or DEFAULT_CLASSIFIER
    blocks: List[str] = []
    buffer: List[str] = []

    def flush() -> None:
        if buffer:
            blocks.append(join_lines(buffer, dehyphenate=dehyphenate, language=language))
            buffer.clear()

    for line in lines:
        trimmed = line.strip()
        kind = strategy.classify(trimmed)

        if kind is LineClass.BLANK:
            flush()
            continue

        if kind is LineClass.STRUCTURAL:
            flush()
            if strategy.structural_kind(trimmed) is StructuralKind.HEADING:
                blocks.append(trimmed)
            else:
                buffer.append(trimmed)
            continue

        if len(trimmed) < min_line_length:
            logger.debug("Dropping short line %s", preview(trimmed))
            continue

        buffer.append(trimmed)
        if preserve_original_line_breaks:
            flush()

    flush()
    return blocks


def reflow(
    text: str,
    *,
    classifier: Optional[StructuralClassifier] = None,
    preserve_original_line_breaks: bool = False,
    min_line_length: int = 0,
    dehyphenate: bool = False,
    language: str = "en",
    fix_unicode: bool = False,
) -> str:
    """Join prose lines into paragraphs and isolate structural lines.

    Args:
        text: Raw extracted text with its original line breaks.
        classifier: Structural classifier; the module default when omitted.
        preserve_original_line_breaks: Emit every prose line as its own block.
        min_line_length: Drop non-structural lines shorter than this.
        dehyphenate: Repair words hyphenated across line breaks.
        language: ``wordfreq`` language code used by ``dehyphenate``.
        fix_unicode: Repair mojibake and ligatures with ``ftfy`` first.

    Returns:
        Blocks joined by one blank line, stripped; ``""`` for blank input.
    """

    require_text(text, "reflow")
    if not text.strip():
        return ""

    logger.debug("reflow called with %d chars", len(text))
    logger.debug("Input text preview: %s", preview(text))

    source = ftfy.fix_text(text) if fix_unicode else text
    blocks = reflow_blocks(
        normalize_newlines(source).split("\n"),
        classifier=classifier,
        preserve_original_line_breaks=preserve_original_line_breaks,
        min_line_length=min_line_length,
        dehyphenate=dehyphenate,
        language=language,
    )
    logger.debug("Reflowed into %d blocks", len(blocks))

    result = BLOCK_SEPARATOR.join(blocks).strip()
    logger.debug("reflow result preview: %s", preview(result))
    return result


__all__ = ["BLOCK_SEPARATOR", "join_lines", "reflow", "reflow_blocks"]

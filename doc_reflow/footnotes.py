"""Footnote extraction and relocation.

A footnote is a marker (``[3]``, ``(3)``, ``*``, ``†``) followed by its body,
which runs until the next marker or the next blank line. Bodies are moved to a
trailing ``--- FOOTNOTES ---`` section and markers are renumbered ``[1]``,
``[2]``... in the order they are extracted.

Two scan orders are supported:

- ``"document"``: one left-to-right scan over every marker style, so the
  numbering follows reading order.
- ``"pattern"``: one scan per marker style in priority order, so all
  bracketed markers are numbered before parenthesized ones, and so on.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from functools import reduce
from typing import List, Optional, Pattern, Sequence, Tuple

from doc_reflow.errors import require_text
from doc_reflow.text_utils import BLANK_LINE_RE, preview

logger = logging.getLogger(__name__)

FOOTNOTE_DELIMITER = "--- FOOTNOTES ---"

MARKER_PATTERNS: Tuple[Tuple[str, str], ...] = (
    ("bracket", r"\[\d+\]"),
    ("paren", r"\(\d+\)"),
    ("asterisk", r"\*+"),
    ("dagger", r"†+"),
)
CUSTOM_KIND = "custom"

SCAN_ORDERS = ("document", "pattern")
DEFAULT_MAX_BODY_CHARS = 2000


@dataclass(frozen=True)
class Footnote:
    """One extracted footnote."""

    marker: str
    index: int
    body: str

    @property
    def entry(self) -> str:
        return f"[{self.index}] {self.body}"


def _combined_pattern(custom_pattern: Optional[str]) -> Pattern[str]:
    parts = [f"(?P<{kind}>{pattern})" for kind, pattern in MARKER_PATTERNS]
    if custom_pattern:
        try:
            compiled = re.compile(custom_pattern)
        except re.error as exc:
            raise ValueError(f"invalid footnote pattern {custom_pattern!r}: {exc}") from exc
        if compiled.fullmatch(""):
            raise ValueError(f"footnote pattern {custom_pattern!r} matches the empty string")
        parts.append(f"(?P<{CUSTOM_KIND}>{custom_pattern})")
    return re.compile("|".join(parts))


@dataclass(frozen=True)
class FootnoteScanner:
    """Locate footnote markers and bodies without mutating any shared state."""

    custom_pattern: Optional[str] = None
    scan_order: str = "document"
    max_body_chars: int = DEFAULT_MAX_BODY_CHARS
    marker_re: Pattern[str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.scan_order not in SCAN_ORDERS:
            raise ValueError(
                f"scan_order must be one of {SCAN_ORDERS}, got {self.scan_order!r}"
            )
        if self.max_body_chars < 1:
            raise ValueError("max_body_chars must be positive")
        object.__setattr__(self, "marker_re", _combined_pattern(self.custom_pattern))

    @property
    def kinds(self) -> Tuple[str, ...]:
        base = tuple(kind for kind, _ in MARKER_PATTERNS)
        return base + ((CUSTOM_KIND,) if self.custom_pattern else ())

    def _body_end(self, text: str, start: int, boundary: int) -> int:
        limit = min(boundary, start + self.max_body_chars)
        blank = BLANK_LINE_RE.search(text, start, limit)
        return blank.start() if blank else limit

    def _extract(
        self,
        text: str,
        found: Tuple[Footnote, ...],
        kind: Optional[str],
        move_bodies: bool,
    ) -> Tuple[str, Tuple[Footnote, ...]]:
        markers = list(self.marker_re.finditer(text))
        notes: List[Footnote] = list(found)
        pieces: List[str] = []
        pos = 0

        for i, match in enumerate(markers):
            if kind is not None and match.lastgroup != kind:
                continue
            boundary = markers[i + 1].start() if i + 1 < len(markers) else len(text)
            raw_body = text[match.end() : self._body_end(text, match.end(), boundary)]
            body = raw_body.strip()
            if not body:
                continue

            index = len(notes) + 1
            notes.append(Footnote(marker=match.group(0), index=index, body=body))
            pieces.extend((text[pos : match.start()], f"[{index}]"))
            pos = match.end() + len(raw_body.rstrip()) if move_bodies else match.end()

        pieces.append(text[pos:])
        return "".join(pieces), tuple(notes)

    def scan(self, text: str, *, move_bodies: bool = True) -> Tuple[str, Tuple[Footnote, ...]]:
        """Return ``text`` with markers renumbered and the footnotes found."""

        passes: Sequence[Optional[str]] = (
            self.kinds if self.scan_order == "pattern" else (None,)
        )
        return reduce(
            lambda acc, kind: self._extract(acc[0], acc[1], kind, move_bodies),
            passes,
            (text, ()),
        )


DEFAULT_SCANNER = FootnoteScanner()


def render_footnote_section(notes: Sequence[Footnote]) -> str:
    """Return the trailing section for ``notes`` or ``""`` when empty."""

    if not notes:
        return ""
    return f"\n\n{FOOTNOTE_DELIMITER}\n\n" + "\n\n".join(n.entry for n in notes)


def split_footnotes(
    text: str, scanner: Optional[FootnoteScanner] = None
) -> Tuple[str, Tuple[Footnote, ...]]:
    """Return the main text with bodies removed and the extracted footnotes."""

    require_text(text, "split_footnotes")
    return (scanner or DEFAULT_SCANNER).scan(text)


def extract_footnotes(
    text: str,
    *,
    scanner: Optional[FootnoteScanner] = None,
    preserve_inline: bool = False,
    move_to_end: bool = True,
) -> str:
    """Renumber footnote markers and relocate their bodies to a trailing section.

    When ``move_to_end`` is ``False`` markers are renumbered in place and their
    bodies stay where they are. ``preserve_inline`` returns ``text`` untouched.
    Text without footnotes is returned unchanged.
    """

    require_text(text, "extract_footnotes")
    if preserve_inline:
        return text

    main, notes = (scanner or DEFAULT_SCANNER).scan(text, move_bodies=move_to_end)
    if not notes:
        return text

    logger.debug("Extracted %d footnotes", len(notes))
    logger.debug("First footnote preview: %s", preview(notes[0].entry))
    return main + render_footnote_section(notes) if move_to_end else main


__all__ = [
    "DEFAULT_MAX_BODY_CHARS",
    "DEFAULT_SCANNER",
    "FOOTNOTE_DELIMITER",
    "Footnote",
    "FootnoteScanner",
    "MARKER_PATTERNS",
    "SCAN_ORDERS",
    "extract_footnotes",
    "render_footnote_section",
    "split_footnotes",
]

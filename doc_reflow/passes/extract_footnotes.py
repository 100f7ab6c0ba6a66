"""Footnote relocation pass."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from doc_reflow.errors import require_text
from doc_reflow.footnotes import (
    DEFAULT_MAX_BODY_CHARS,
    FootnoteScanner,
    render_footnote_section,
)
from doc_reflow.framework import Artifact, register, with_metrics


@dataclass
class _ExtractFootnotesPass:
    name: str = field(default="extract_footnotes", init=False)
    input_type: type = field(default=str, init=False)
    output_type: type = field(default=str, init=False)
    preserve_inline: bool = False
    move_to_end: bool = True
    custom_pattern: Optional[str] = None
    scan_order: str = "document"
    max_body_chars: int = DEFAULT_MAX_BODY_CHARS
    scanner: FootnoteScanner = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.scanner = FootnoteScanner(
            custom_pattern=self.custom_pattern,
            scan_order=self.scan_order,
            max_body_chars=self.max_body_chars,
        )

    def __call__(self, a: Artifact) -> Artifact:
        text = require_text(a.payload, self.name)
        if self.preserve_inline:
            return with_metrics(a, self.name, text, footnotes=0)

        main, notes = self.scanner.scan(text, move_bodies=self.move_to_end)
        if not notes:
            result = text
        elif self.move_to_end:
            result = main + render_footnote_section(notes)
        else:
            result = main
        return with_metrics(a, self.name, result, footnotes=len(notes))


extract_footnotes = register(_ExtractFootnotesPass())

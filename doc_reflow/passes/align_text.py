"""Spacing and punctuation normalization pass."""

from __future__ import annotations

from dataclasses import dataclass, field

from doc_reflow.alignment import align_text as _align_text
from doc_reflow.errors import require_text
from doc_reflow.framework import Artifact, register, with_metrics


@dataclass
class _AlignTextPass:
    name: str = field(default="align_text", init=False)
    input_type: type = field(default=str, init=False)
    output_type: type = field(default=str, init=False)
    isolate_uppercase_headings: bool = True

    def __call__(self, a: Artifact) -> Artifact:
        text = require_text(a.payload, self.name)
        aligned = _align_text(text, isolate_uppercase=self.isolate_uppercase_headings)
        return with_metrics(a, self.name, aligned, normalized=True, chars=len(aligned))


align_text = register(_AlignTextPass())

"""Paragraph reflow pass.

Wraps :func:`doc_reflow.paragraph_reflow.reflow` and records how many blocks and
headings the text was rebuilt into.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from doc_reflow.errors import require_text
from doc_reflow.framework import Artifact, register, with_metrics
from doc_reflow.paragraph_reflow import BLOCK_SEPARATOR, reflow as _reflow
from doc_reflow.structure_detection import StructuralClassifier, StructuralKind


@dataclass
class _ReflowPass:
    name: str = field(default="reflow", init=False)
    input_type: type = field(default=str, init=False)
    output_type: type = field(default=str, init=False)
    strict_structural_detection: bool = True
    custom_structural_patterns: Tuple[str, ...] = ()
    preserve_original_line_breaks: bool = False
    min_line_length: int = 0
    dehyphenate: bool = False
    language: str = "en"
    fix_unicode: bool = False
    classifier: StructuralClassifier = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.custom_structural_patterns = tuple(self.custom_structural_patterns)
        self.classifier = StructuralClassifier(
            strict_structural_detection=self.strict_structural_detection,
            custom_structural_patterns=self.custom_structural_patterns,
        )

    def __call__(self, a: Artifact) -> Artifact:
        text = require_text(a.payload, self.name)
        result = _reflow(
            text,
            classifier=self.classifier,
            preserve_original_line_breaks=self.preserve_original_line_breaks,
            min_line_length=self.min_line_length,
            dehyphenate=self.dehyphenate,
            language=self.language,
            fix_unicode=self.fix_unicode,
        )
        blocks = result.split(BLOCK_SEPARATOR) if result else []
        headings = sum(
            1
            for block in blocks
            if self.classifier.structural_kind(block) is StructuralKind.HEADING
        )
        return with_metrics(a, self.name, result, blocks=len(blocks), headings=headings)


reflow = register(_ReflowPass())

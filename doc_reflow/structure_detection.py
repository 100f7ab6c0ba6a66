"""Line classification for headings, list items and prose.

The classifier is a heuristic over single trimmed lines. It errs on the side
of keeping headings out of paragraphs; occasional prose lines that open with a
keyword (``Section 3 of this Agreement...``) are accepted false positives.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Pattern, Tuple

from doc_reflow.errors import require_text


class LineClass(Enum):
    BLANK = "blank"
    STRUCTURAL = "structural"
    PROSE = "prose"


class StructuralKind(Enum):
    HEADING = "heading"
    LIST_ITEM = "list_item"


HEADING_KEYWORDS: Tuple[str, ...] = (
    # English
    "CHAPTER",
    "ARTICLE",
    "SECTION",
    "ANNEX",
    "APPENDIX",
    "PREAMBLE",
    "PART",
    "TITLE",
    "SCHEDULE",
    # Portuguese
    "CAPÍTULO",
    "ARTIGO",
    "SEÇÃO",
    "ANEXO",
    "APÊNDICE",
    "PREÂMBULO",
    "PARTE",
    "TÍTULO",
    # Spanish
    "ARTÍCULO",
    "SECCIÓN",
    "APÉNDICE",
    "PREÁMBULO",
    # French
    "CHAPITRE",
    "ANNEXE",
    "APPENDICE",
    "PRÉAMBULE",
    "PARTIE",
    "TITRE",
)

# ``12.`` but not ``1.5``; ``(a)``; ``(iv)`` / ``(IV)``
LIST_ITEM_PATTERN = r"^\s*(?:\d+\.(?!\d)|\([a-z]\)|\((?:[ivxlcdm]+|[IVXLCDM]+)\))"

ALL_CAPS_MAX_LENGTH = 50


def _keyword_pattern(keywords: Tuple[str, ...]) -> str:
    ordered = sorted(set(keywords), key=len, reverse=True)
    return rf"^(?:{'|'.join(map(re.escape, ordered))})(?:\s|$)"


def _compile_custom(patterns: Tuple[str, ...]) -> Tuple[Pattern[str], ...]:
    def _compile(pattern: str) -> Pattern[str]:
        try:
            return re.compile(pattern)
        except re.error as exc:
            raise ValueError(f"invalid structural pattern {pattern!r}: {exc}") from exc

    return tuple(_compile(p) for p in patterns)


def _is_short_all_caps(text: str) -> bool:
    return (
        len(text) < ALL_CAPS_MAX_LENGTH
        and any(ch.isupper() for ch in text)
        and not any(ch.islower() for ch in text)
    )


@dataclass(frozen=True)
class StructuralClassifier:
    """Encapsulate structural-line heuristics as pure callables."""

    keywords: Tuple[str, ...] = HEADING_KEYWORDS
    strict_structural_detection: bool = True
    custom_structural_patterns: Tuple[str, ...] = ()
    keyword_re: Pattern[str] = field(init=False, repr=False)
    list_item_re: Pattern[str] = field(init=False, repr=False)
    custom_res: Tuple[Pattern[str], ...] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "keywords", tuple(self.keywords))
        object.__setattr__(
            self, "custom_structural_patterns", tuple(self.custom_structural_patterns)
        )
        object.__setattr__(
            self,
            "keyword_re",
            re.compile(_keyword_pattern(self.keywords), re.IGNORECASE),
        )
        object.__setattr__(self, "list_item_re", re.compile(LIST_ITEM_PATTERN))
        object.__setattr__(
            self, "custom_res", _compile_custom(self.custom_structural_patterns)
        )

    def is_heading(self, line: str) -> bool:
        """Return ``True`` when ``line`` reads as a heading."""

        text = line.strip()
        if not text:
            return False
        return bool(
            self.keyword_re.match(text)
            or any(p.search(text) for p in self.custom_res)
            or (not self.strict_structural_detection and _is_short_all_caps(text))
        )

    def is_list_item(self, line: str) -> bool:
        """Return ``True`` when ``line`` opens with a list-item prefix."""

        return bool(line.strip() and self.list_item_re.match(line))

    def structural_kind(self, line: str) -> StructuralKind | None:
        if self.is_list_item(line):
            return StructuralKind.LIST_ITEM
        if self.is_heading(line):
            return StructuralKind.HEADING
        return None

    def classify(self, line: str) -> LineClass:
        if not line.strip():
            return LineClass.BLANK
        if self.structural_kind(line) is not None:
            return LineClass.STRUCTURAL
        return LineClass.PROSE


def _resolve(classifier: StructuralClassifier | None) -> StructuralClassifier:
    return classifier or DEFAULT_CLASSIFIER


def classify(line: str, classifier: StructuralClassifier | None = None) -> LineClass:
    """Classify one line as blank, structural or prose."""
    return _resolve(classifier).classify(require_text(line, "classify"))


def structural_kind(
    line: str, classifier: StructuralClassifier | None = None
) -> StructuralKind | None:
    return _resolve(classifier).structural_kind(require_text(line, "structural_kind"))


def is_heading(line: str, classifier: StructuralClassifier | None = None) -> bool:
    return _resolve(classifier).is_heading(require_text(line, "is_heading"))


def is_list_item(line: str, classifier: StructuralClassifier | None = None) -> bool:
    return _resolve(classifier).is_list_item(require_text(line, "is_list_item"))


DEFAULT_CLASSIFIER = StructuralClassifier()


__all__ = [
    "ALL_CAPS_MAX_LENGTH",
    "DEFAULT_CLASSIFIER",
    "HEADING_KEYWORDS",
    "LIST_ITEM_PATTERN",
    "LineClass",
    "StructuralClassifier",
    "StructuralKind",
    "classify",
    "is_heading",
    "is_list_item",
    "structural_kind",
]

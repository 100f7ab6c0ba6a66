"""Rebuild paragraphs, relocate footnotes and normalize spacing in extracted text."""

from doc_reflow.alignment import align_text
from doc_reflow.core import format_text, run_format
from doc_reflow.errors import InputError
from doc_reflow.footnotes import FOOTNOTE_DELIMITER, extract_footnotes
from doc_reflow.paragraph_reflow import reflow
from doc_reflow.structure_detection import LineClass, classify

__all__ = [
    "FOOTNOTE_DELIMITER",
    "InputError",
    "LineClass",
    "align_text",
    "classify",
    "extract_footnotes",
    "format_text",
    "reflow",
    "run_format",
]

from collections.abc import Callable
from functools import reduce

import pytest

from doc_reflow.config import PipelineSpec
from doc_reflow.core import _enforce_invariants


def _add(step: str) -> Callable[[PipelineSpec], PipelineSpec]:
    return lambda spec: PipelineSpec(pipeline=[*spec.pipeline, step])


def _build_pipeline(*steps: str) -> PipelineSpec:
    return reduce(lambda spec, s: _add(s)(spec), steps, PipelineSpec(pipeline=[]))


def test_valid_pipeline() -> None:
    spec = _build_pipeline("reflow", "extract_footnotes", "align_text")
    assert _enforce_invariants(spec) == ["reflow", "extract_footnotes", "align_text"]


def test_steps_may_be_skipped() -> None:
    spec = _build_pipeline("reflow", "align_text")
    assert _enforce_invariants(spec) == ["reflow", "align_text"]


def test_alignment_must_run_last() -> None:
    spec = _build_pipeline("align_text", "extract_footnotes")
    with pytest.raises(ValueError):
        _enforce_invariants(spec)


def test_footnotes_require_reflowed_text() -> None:
    spec = _build_pipeline("extract_footnotes", "reflow")
    with pytest.raises(ValueError):
        _enforce_invariants(spec)


def test_unknown_step_rejected() -> None:
    spec = _build_pipeline("reflow", "summarize")
    with pytest.raises(KeyError):
        _enforce_invariants(spec)

from dataclasses import replace

import pytest

from doc_reflow.core import configure_pass
from doc_reflow.errors import InputError
from doc_reflow.framework import Artifact, run_pipeline, with_metrics
from doc_reflow.passes.align_text import align_text
from doc_reflow.passes.extract_footnotes import extract_footnotes
from doc_reflow.passes.reflow import reflow


def test_reflow_pass_counts_blocks_and_headings() -> None:
    result = reflow(Artifact(payload="SECTION 2\nbody one\nbody two\n\nmore"))
    assert result.payload == "SECTION 2\n\nbody one body two\n\nmore"
    assert result.meta["metrics"]["reflow"] == {"blocks": 3, "headings": 1}


def test_reflow_pass_empty_payload() -> None:
    result = reflow(Artifact(payload=""))
    assert result.payload == ""
    assert result.meta["metrics"]["reflow"] == {"blocks": 0, "headings": 0}


def test_reflow_pass_custom_patterns_from_yaml_list() -> None:
    configured = configure_pass(reflow, {"custom_structural_patterns": [r"^§\s*\d+"]})
    result = configured(Artifact(payload="§ 1 Scope\napplies here"))
    assert result.payload == "§ 1 Scope\n\napplies here"
    assert configured.custom_structural_patterns == (r"^§\s*\d+",)


def test_configure_pass_leaves_registered_pass_untouched() -> None:
    configured = configure_pass(extract_footnotes, {"move_to_end": False})
    assert configured is not extract_footnotes
    assert extract_footnotes.move_to_end is True
    assert configure_pass(extract_footnotes, {}) is extract_footnotes


def test_extract_footnotes_pass_metrics() -> None:
    result = extract_footnotes(Artifact(payload="Fact[9] cited source"))
    assert result.payload.endswith("--- FOOTNOTES ---\n\n[1] cited source")
    assert result.meta["metrics"]["extract_footnotes"] == {"footnotes": 1}


def test_extract_footnotes_pass_preserve_inline() -> None:
    keep = replace(extract_footnotes, preserve_inline=True)
    result = keep(Artifact(payload="Fact[9] cited source"))
    assert result.payload == "Fact[9] cited source"
    assert result.meta["metrics"]["extract_footnotes"] == {"footnotes": 0}


def test_align_text_pass_metrics() -> None:
    result = align_text(Artifact(payload="a ,b"))
    assert result.payload == "a, b"
    assert result.meta["metrics"]["align_text"] == {"normalized": True, "chars": 4}


def test_passes_reject_non_text_payload() -> None:
    with pytest.raises(InputError, match="reflow expects str input, got dict"):
        reflow(Artifact(payload={"text": "x"}))


def test_run_pipeline_chains_metrics() -> None:
    out = run_pipeline(
        ["reflow", "extract_footnotes", "align_text"],
        Artifact(payload="One\ntwo (3) note"),
    )
    assert set(out.meta["metrics"]) == {"reflow", "extract_footnotes", "align_text"}


def test_with_metrics_merges_existing_entries() -> None:
    first = with_metrics(Artifact(payload="x"), "step", "y", a=1)
    second = with_metrics(first, "step", "z", b=2)
    assert second.payload == "z"
    assert second.meta["metrics"]["step"] == {"a": 1, "b": 2}
    assert first.meta["metrics"]["step"] == {"a": 1}

    third = with_metrics(second, "step", "w", name="n", payload=0)
    assert third.meta["metrics"]["step"] == {"a": 1, "b": 2, "name": "n", "payload": 0}

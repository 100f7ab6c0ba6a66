import pytest

from doc_reflow import format_text, run_format
from doc_reflow.config import PipelineSpec
from doc_reflow.errors import InputError
from doc_reflow.processing_log import ProcessingLogEntry

RAW = (
    "CHAPTER 1\n"
    "This is a line\n"
    "that continues .\n"
    "\n"
    "See note[1] Extra detail here."
)

EXPECTED = (
    "CHAPTER 1\n\n"
    "This is a line that continues.\n\n"
    "See note[1]\n\n"
    "--- FOOTNOTES ---\n\n"
    "[1] Extra detail here."
)


def test_full_pipeline() -> None:
    assert format_text(RAW) == EXPECTED


def test_empty_input() -> None:
    assert format_text("") == ""
    assert format_text(" \n\t\n ") == ""


def test_output_is_stable_across_calls() -> None:
    assert format_text(RAW) == format_text(RAW)


def test_footnote_body_does_not_cross_reflowed_paragraphs() -> None:
    raw = "Claim* source\nline two\n\nNext paragraph\ncontinues."
    result = format_text(raw)
    assert result == (
        "Claim[1]\n\nNext paragraph continues.\n\n--- FOOTNOTES ---\n\n"
        "[1] source line two"
    )


@pytest.mark.parametrize("value", [None, b"raw bytes", 3.5, ["a"]])
def test_non_text_input_raises_input_error(value: object) -> None:
    with pytest.raises(InputError) as info:
        format_text(value)  # type: ignore[arg-type]
    assert info.value.operation == "format_text"
    assert isinstance(info.value, TypeError)


def test_unknown_step_rejected(spec) -> None:
    with pytest.raises(KeyError, match="unknown steps"):
        format_text("x", spec("reflow", "translate"))


@pytest.mark.parametrize(
    "steps",
    [
        ("align_text", "reflow"),
        ("extract_footnotes", "reflow"),
        ("reflow", "reflow"),
    ],
)
def test_out_of_order_steps_rejected(spec, steps) -> None:
    with pytest.raises(ValueError, match="pipeline steps must follow"):
        format_text("x", spec(*steps))


def test_subset_pipeline_runs(spec) -> None:
    assert format_text("a\nb ,c", spec("reflow")) == "a b ,c"
    assert format_text("a\nb ,c", spec("reflow", "align_text")) == "a b, c"


def test_options_reach_passes(spec) -> None:
    raw = "A (1) paren note\n\nB [2] bracket note"
    result = format_text(
        raw, spec(extract_footnotes={"scan_order": "pattern"})
    )
    assert result.endswith("[1] bracket note\n\n[2] paren note")


def test_relaxed_detection_option(spec) -> None:
    raw = "INTRODUCTION\nText follows here"
    relaxed = spec(reflow={"strict_structural_detection": False})
    assert format_text(raw, relaxed) == "INTRODUCTION\n\nText follows here"
    assert format_text(raw) == "INTRODUCTION Text follows here"


def test_unknown_pass_option_warns(spec) -> None:
    with pytest.warns(UserWarning, match="Unknown options for reflow: colour"):
        format_text("a\nb", spec(reflow={"colour": "blue"}))


def test_invalid_option_value_raises(spec) -> None:
    with pytest.raises(ValueError, match="scan_order"):
        format_text("a", spec(extract_footnotes={"scan_order": "sideways"}))


def test_run_format_records_processing_log() -> None:
    artifact, timings = run_format(RAW, PipelineSpec())
    entries = artifact.meta["processing_log"]
    assert [e.step for e in entries] == ["reflow", "extract_footnotes", "align_text"]
    assert all(isinstance(e, ProcessingLogEntry) for e in entries)
    assert set(timings) == {"reflow", "extract_footnotes", "align_text"}
    metrics = artifact.meta["metrics"]
    assert metrics["reflow"] == {"blocks": 3, "headings": 1}
    assert metrics["extract_footnotes"] == {"footnotes": 1}
    assert metrics["align_text"]["normalized"] is True
    assert entries[0].details == "blocks=3, headings=1"

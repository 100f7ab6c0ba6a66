from datetime import datetime, timedelta, timezone

from doc_reflow.processing_log import ProcessingLogEntry, render_log, summarize_metrics
from doc_reflow.text_utils import normalize_newlines, pipe, stabilize

START = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def _entry(step: str, millis: int, details: str = "") -> ProcessingLogEntry:
    return ProcessingLogEntry(step, START, START + timedelta(milliseconds=millis), details)


def test_entry_renders_timestamp_step_and_duration() -> None:
    assert str(_entry("reflow", 3, "blocks=12")) == (
        "[2024-03-01 12:00:00] reflow completed: blocks=12 (3ms)"
    )


def test_long_steps_render_in_seconds() -> None:
    assert str(_entry("align_text", 2500)).endswith("align_text completed (2s)")


def test_render_log_joins_lines() -> None:
    rendered = render_log([_entry("reflow", 1), _entry("align_text", 2)])
    assert rendered.splitlines()[1].startswith("[2024-03-01 12:00:00] align_text")


def test_summarize_metrics_sorts_keys() -> None:
    assert summarize_metrics({"headings": 1, "blocks": 3}) == "blocks=3, headings=1"
    assert summarize_metrics(None) == ""


def test_normalize_newlines_variants() -> None:
    assert normalize_newlines("a\r\nb\rc\u2028d\u2029e") == "a\nb\nc\nd\ne"


def test_pipe_and_stabilize() -> None:
    assert pipe(" x ", str.strip, str.upper) == "X"
    assert stabilize("aaaa", lambda s: s.replace("aa", "a")) == "a"
    assert stabilize(10, lambda n: max(n - 3, 0)) == 0


def test_stabilize_runs_until_no_change() -> None:
    calls = []

    def shrink(s: str) -> str:
        calls.append(s)
        return s[1:] if s.startswith("x") else s

    assert stabilize("x" * 12, shrink) == ""
    assert len(calls) == 13

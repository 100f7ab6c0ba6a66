"""Per-step processing log for a formatting run.

Each pipeline step records when it started and finished. Entries render as
single human-readable lines, e.g.::

    [2024-03-01 12:00:00] reflow completed: 12 blocks (3ms)
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterable, List


def _format_duration(millis: int) -> str:
    return f"{millis}ms" if millis < 1000 else f"{millis // 1000}s"


@dataclass(frozen=True)
class ProcessingLogEntry:
    """Single completed step.

    Attributes:
        step: Pipeline step name.
        started: UTC time the step began.
        finished: UTC time the step ended.
        details: Optional short summary (counts, flags).
    """

    step: str
    started: datetime
    finished: datetime
    details: str = ""

    @property
    def duration_ms(self) -> int:
        return max(0, int((self.finished - self.started).total_seconds() * 1000))

    def __str__(self) -> str:
        timestamp = self.finished.strftime("%Y-%m-%d %H:%M:%S")
        details = f": {self.details}" if self.details else ""
        return (
            f"[{timestamp}] {self.step} completed{details} "
            f"({_format_duration(self.duration_ms)})"
        )


def now() -> datetime:
    return datetime.now(timezone.utc)


def summarize_metrics(metrics: dict | None) -> str:
    """Render a step's metrics mapping as ``key=value`` pairs."""

    if not metrics:
        return ""
    return ", ".join(f"{key}={value}" for key, value in sorted(metrics.items()))


def render_log(entries: Iterable[ProcessingLogEntry]) -> str:
    lines: List[str] = [str(entry) for entry in entries]
    return "\n".join(lines)

from __future__ import annotations

import logging
import time
import warnings
from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass, replace
from functools import reduce
from typing import Any

import doc_reflow.passes  # noqa: F401  (registers the passes)
from doc_reflow.config import DEFAULT_PIPELINE, PipelineSpec
from doc_reflow.errors import require_text
from doc_reflow.framework import Artifact, Pass, registry
from doc_reflow.processing_log import ProcessingLogEntry, now, summarize_metrics

logger = logging.getLogger(__name__)

Timings = dict[str, float]


def _pass_steps(steps: Sequence[str]) -> list[str]:
    """Return ``steps`` if every one is a registered pass; error on unknown ones."""
    regs = registry()
    unknown = [s for s in steps if s not in regs]
    if unknown:
        raise KeyError(f"unknown steps: {unknown}")
    return list(steps)


def _ensure_canonical_order(steps: Sequence[str]) -> None:
    """Raise when ``steps`` repeat or leave the reflow -> footnotes -> align order."""
    positions = [DEFAULT_PIPELINE.index(s) for s in steps if s in DEFAULT_PIPELINE]
    if any(b <= a for a, b in zip(positions, positions[1:])):
        raise ValueError(
            f"pipeline steps must follow {' -> '.join(DEFAULT_PIPELINE)}: {list(steps)}"
        )


def _enforce_invariants(spec: PipelineSpec) -> list[str]:
    """Return validated steps for ``spec``."""
    steps = _pass_steps(spec.pipeline)
    _ensure_canonical_order(steps)
    return steps


def _option_names(pass_obj: Pass) -> set[str]:
    return {f.name for f in fields(pass_obj) if f.init} if is_dataclass(pass_obj) else set()


def configure_pass(pass_obj: Pass, opts: Mapping[str, Any]) -> Pass:
    """Return a new pass with ``opts`` merged without mutating ``pass_obj``."""

    if not opts:
        return pass_obj
    names = _option_names(pass_obj)
    ignored = sorted(k for k in opts if k not in names)
    if ignored:
        warnings.warn(
            f"Unknown options for {pass_obj.name}: {', '.join(ignored)}",
            stacklevel=2,
        )
    updates = {k: v for k, v in opts.items() if k in names}
    return replace(pass_obj, **updates) if updates else pass_obj


def _time_step(
    acc: tuple[Artifact, Timings, tuple[ProcessingLogEntry, ...]],
    p: Pass,
) -> tuple[Artifact, Timings, tuple[ProcessingLogEntry, ...]]:
    """Apply ``p`` to ``acc`` while recording its execution time."""
    a, timings, entries = acc
    started, t0 = now(), time.perf_counter()
    a = p(a)
    elapsed = time.perf_counter() - t0
    metrics = a.metrics.get(p.name)
    entry = ProcessingLogEntry(p.name, started, now(), summarize_metrics(metrics))
    logger.debug("%s", entry)
    return a, {**timings, p.name: elapsed}, (*entries, entry)


def run_format(
    raw: str, spec: PipelineSpec | None = None
) -> tuple[Artifact, Timings]:
    """Run the passes declared in ``spec`` over ``raw`` capturing per-pass timings."""

    text = require_text(raw, "format_text")
    spec = spec or PipelineSpec()
    steps = _enforce_invariants(spec)
    passes = [configure_pass(registry()[name], spec.options.get(name, {})) for name in steps]

    seed = Artifact(payload=text, meta={"metrics": {}})
    a, timings, entries = reduce(_time_step, passes, (seed, {}, ()))
    meta = {**(a.meta or {}), "processing_log": list(entries)}
    return Artifact(payload=a.payload, meta=meta), timings


def format_text(raw: str, spec: PipelineSpec | None = None) -> str:
    """Reflow paragraphs, relocate footnotes and normalize spacing in ``raw``."""

    artifact, _ = run_format(raw, spec)
    return artifact.payload


def run_inspect() -> dict[str, dict[str, Any]]:
    """Return registered passes with their default options."""
    return {
        name: {
            "input_type": getattr(p.input_type, "__name__", str(p.input_type)),
            "output_type": getattr(p.output_type, "__name__", str(p.output_type)),
            "options": {n: getattr(p, n) for n in sorted(_option_names(p))},
        }
        for name, p in registry().items()
    }

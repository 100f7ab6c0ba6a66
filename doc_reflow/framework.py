"""Pass registry and the artifact threaded through the formatting pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from types import MappingProxyType
from typing import Any, Dict, Mapping, Protocol, Sequence, Type, runtime_checkable


@dataclass(frozen=True)
class Artifact:
    """Text payload plus run metadata (per-pass metrics, processing log)."""

    payload: Any
    meta: Dict[str, Any] | None = None

    @property
    def metrics(self) -> Dict[str, Dict[str, Any]]:
        return dict((self.meta or {}).get("metrics") or {})


@runtime_checkable
class Pass(Protocol):
    name: str
    input_type: Type
    output_type: Type

    def __call__(self, a: Artifact) -> Artifact:
        """Execute the pass."""
        ...


_REGISTRY: Mapping[str, Pass] = MappingProxyType({})


def register(p: Pass) -> Pass:
    """Register ``p`` under its name; every stage maps ``str`` to ``str``."""
    if (p.input_type, p.output_type) != (str, str):
        raise TypeError(f"pass {p.name!r} must consume and produce str")
    global _REGISTRY
    _REGISTRY = MappingProxyType({**_REGISTRY, p.name: p})
    return p


def registry() -> Dict[str, Pass]:
    """Registered passes in registration order."""
    return dict(_REGISTRY)


def run_pipeline(steps: Sequence[str], a: Artifact) -> Artifact:
    """Apply the registered ``steps`` in order; unknown names raise ``KeyError``."""
    passes = [_REGISTRY[s] for s in steps]
    return reduce(lambda acc, p: p(acc), passes, a)


def with_metrics(a: Artifact, name: str, payload: Any, /, **metrics: Any) -> Artifact:
    """Return a new artifact carrying ``payload`` and ``metrics`` under ``meta['metrics'][name]``."""
    all_metrics = a.metrics
    all_metrics[name] = {**(all_metrics.get(name) or {}), **metrics}
    return Artifact(payload=payload, meta={**(a.meta or {}), "metrics": all_metrics})

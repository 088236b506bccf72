from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, Mapping, Protocol, Type, runtime_checkable


@dataclass(frozen=True)
class Artifact:
    """Pass input and output: raw pages or document text, plus metrics."""

    payload: Any
    meta: Dict[str, Any] | None = None


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
    """Add ``p`` under ``p.name``; a later pass with the same name replaces it."""
    global _REGISTRY
    _REGISTRY = MappingProxyType({**dict(_REGISTRY), p.name: p})
    return p


def with_metrics(a: Artifact, name: str, payload: Any, **metrics: Any) -> Artifact:
    """Return a new artifact carrying ``payload`` and per-pass ``metrics``.

    Integer counters add up when the same pass runs more than once.
    """
    meta = dict(a.meta or {})
    all_metrics = dict(meta.get("metrics", {}))
    previous = all_metrics.get(name, {})
    all_metrics[name] = {
        **previous,
        **{
            key: previous.get(key, 0) + value if _is_counter(value) else value
            for key, value in metrics.items()
        },
    }
    meta["metrics"] = all_metrics
    return Artifact(payload=payload, meta=meta)


def registry() -> Dict[str, Pass]:
    """Name -> pass snapshot used by pipeline building and ``inspect``."""
    return dict(_REGISTRY)


def _is_counter(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)

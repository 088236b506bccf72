from __future__ import annotations

import logging
import os
import time
from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass, replace
from datetime import datetime, timezone
from pathlib import Path, PurePath
from typing import Any

from pydantic import BaseModel

from pdf_to_text import passes  # noqa: F401  (registers passes)
from pdf_to_text.adapters import io_pdf
from pdf_to_text.config import PipelineSpec, load_spec
from pdf_to_text.framework import Artifact, Pass, registry
from pdf_to_text.text_cleaning import RawPage

logger = logging.getLogger(__name__)

ASSEMBLER = "assemble_pages"
PIPELINE_YAML = Path(__file__).resolve().parent / "pipeline.yaml"


class ConversionResult(BaseModel):
    """Cleaned text plus the fields returned to HTTP and CLI callers."""

    success: bool = True
    filename: str
    characters: int
    text: str


def default_spec() -> PipelineSpec:
    """Return the packaged pipeline with environment overrides applied."""
    return load_spec(PIPELINE_YAML)


def _pass_steps(spec: PipelineSpec) -> list[str]:
    """Return pipeline steps; error on names without a registered pass."""
    regs = registry()
    unknown = [s for s in spec.pipeline if s not in regs]
    if unknown:
        raise KeyError(f"unknown steps: {unknown}")
    return list(spec.pipeline)


def _ensure_assembler_first(steps: Sequence[str]) -> None:
    """Raise if ``assemble_pages`` is missing, misplaced or repeated."""
    if not steps or steps[0] != ASSEMBLER:
        raise ValueError(f"{ASSEMBLER} must be the first pipeline step")
    if ASSEMBLER in steps[1:]:
        raise ValueError(f"{ASSEMBLER} may only run once")


def configure_pass(pass_obj: Pass, opts: Mapping[str, Any]) -> Pass:
    """Return a new pass with ``opts`` merged without mutating ``pass_obj``."""
    if not opts or not is_dataclass(pass_obj):
        return pass_obj
    names = {f.name for f in fields(pass_obj) if f.init}
    updates = {k: v for k, v in opts.items() if k in names}
    ignored = sorted(set(opts) - names)
    if ignored:
        logger.warning("%s: ignoring unknown options %s", pass_obj.name, ignored)
    return replace(pass_obj, **updates) if updates else pass_obj


def build_passes(spec: PipelineSpec) -> list[Pass]:
    """Resolve ``spec`` into configured pass instances."""
    steps = _pass_steps(spec)
    _ensure_assembler_first(steps)
    return [configure_pass(registry()[s], spec.options.get(s, {})) for s in steps]


def _timed(p: Pass, a: Artifact, timings: dict[str, float]) -> Artifact:
    t0 = time.perf_counter()
    result = p(a)
    timings[p.name] = timings.get(p.name, 0.0) + time.perf_counter() - t0
    return result


def _clean_until_stable(
    a: Artifact, cleaners: Sequence[Pass], timings: dict[str, float]
) -> tuple[Artifact, int]:
    """Run ``cleaners`` repeatedly until the payload stops changing.

    Every cleaner either leaves the text alone or shortens it, so this ends.
    """
    rounds = 0
    while True:
        rounds += 1
        updated = a
        for p in cleaners:
            updated = _timed(p, updated, timings)
        if updated.payload == a.payload:
            return updated, rounds
        a = updated


def convert_pages(
    raw_pages: Sequence[RawPage] | str,
    spec: PipelineSpec | None = None,
    timings: dict[str, float] | None = None,
) -> Artifact:
    """Run the normalization pipeline and return text with per-pass metrics.

    ``raw_pages`` is one fragment sequence per page. A plain string is taken
    as an already assembled document.
    """
    spec = spec or default_spec()
    assemble, *cleaners = build_passes(spec)
    timings = {} if timings is None else timings
    payload = raw_pages if isinstance(raw_pages, str) else list(raw_pages)
    a = _timed(assemble, Artifact(payload=payload, meta={"metrics": {}}), timings)
    a, rounds = _clean_until_stable(a, cleaners, timings)
    logger.debug("convert_pages: %d chars after %d round(s)", len(a.payload), rounds)
    meta = dict(a.meta or {})
    meta["rounds"] = rounds
    return Artifact(payload=a.payload, meta=meta)


def normalize(
    raw_pages: Sequence[RawPage] | str, spec: PipelineSpec | None = None
) -> str:
    """Turn raw per-page extraction fragments into clean plain text."""
    return convert_pages(raw_pages, spec).payload


def convert_pdf(
    source: str | os.PathLike | bytes,
    spec: PipelineSpec | None = None,
    timings: dict[str, float] | None = None,
) -> str:
    """Extract ``source`` with PyMuPDF and normalize it.

    ``ExtractionError`` from the adapter propagates unchanged.
    """
    pages = io_pdf.read_pages(source)
    return convert_pages(pages, spec, timings).payload


def output_filename(original_name: str, now: datetime | None = None) -> str:
    """Return ``<stem>-<UTC timestamp>.txt`` for a converted upload."""
    stamp = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    stem = PurePath(original_name or "").stem or "document"
    return f"{stem}-{stamp:%Y-%m-%dT%H-%M-%S}-{stamp.microsecond // 1000:03d}Z.txt"


def build_result(
    text: str, original_name: str, now: datetime | None = None
) -> ConversionResult:
    return ConversionResult(
        filename=output_filename(original_name, now),
        characters=len(text),
        text=text,
    )


def run_inspect(spec: PipelineSpec | None = None) -> dict[str, Any]:
    """Return a lightweight view of the registry and pipeline for CLI/tests."""
    spec = spec or default_spec()
    return {
        "passes": {
            name: {"input": p.input_type.__name__, "output": p.output_type.__name__}
            for name, p in registry().items()
        },
        "pipeline": list(spec.pipeline),
        "options": spec.options,
    }

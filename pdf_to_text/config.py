from __future__ import annotations

import os
import pathlib
import warnings
from functools import reduce
from typing import Any, Dict, Iterable, List, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

DEFAULT_PIPELINE: tuple[str, ...] = (
    "assemble_pages",
    "normalize_whitespace",
    "join_letter_runs",
    "filter_repeated_lines",
    "repair_hyphenation",
)

ENV_PREFIX = "PDF_TO_TEXT__"


class PipelineSpec(BaseModel):
    """Declarative pipeline specification."""

    pipeline: List[str] = Field(default_factory=lambda: list(DEFAULT_PIPELINE))
    options: Dict[str, Dict[str, Any]] = Field(default_factory=dict)


class ServerSettings(BaseModel):
    """Settings for the HTTP upload service."""

    host: str = "0.0.0.0"
    port: int = 3000
    max_upload_mb: int = Field(default=20, gt=0)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    environment: str = "development"

    @property
    def max_upload_bytes(self) -> int:
        return self.max_upload_mb * 1024 * 1024

    @property
    def expose_errors(self) -> bool:
        return self.environment != "production"


def _read_yaml(path: str | os.PathLike | None) -> Dict[str, Any]:
    """Return a dict from YAML or {} if path is None/missing/empty."""
    if not path:
        return {}
    p = pathlib.Path(path)
    if not p.exists():
        return {}
    data = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise TypeError("pipeline.yaml must contain a top-level mapping")
    return data


def _env_overrides(
    environ: Mapping[str, str] | None = None,
) -> Dict[str, Dict[str, Any]]:
    """
    Map PDF_TO_TEXT__STEP__key=value -> options[step][key]=value (lower-cased).
    Values are YAML-coerced (so 'true', '42' etc. become bool/int).
    """
    env = os.environ if environ is None else environ
    out: Dict[str, Dict[str, Any]] = {}
    for k, v in env.items():
        if not k.upper().startswith(ENV_PREFIX):
            continue
        rest = k[len(ENV_PREFIX):]
        if "__" not in rest:
            continue
        step, key = rest.lower().split("__", 1)
        try:
            val = yaml.safe_load(v)
        except yaml.YAMLError:
            val = v
        out.setdefault(step, {})[key] = val
    return out


def _merge_options(
    base: Dict[str, Dict[str, Any]], override: Dict[str, Dict[str, Any]]
) -> Dict[str, Dict[str, Any]]:
    """Shallow-merge per-step options with comprehension; override wins."""
    sources = set(base) | set(override)
    return {s: {**base.get(s, {}), **override.get(s, {})} for s in sources}


def _warn_unknown_options(pipeline: Iterable[str], opts: Mapping[str, Any]) -> None:
    """Emit a warning when options contain steps absent from the pipeline."""

    unknown = [step for step in opts if step not in pipeline]
    if unknown:
        warnings.warn(
            f"Unknown pipeline options: {', '.join(sorted(unknown))}",
            stacklevel=2,
        )


def load_spec(
    path: str | os.PathLike | None = "pipeline.yaml",
    overrides: Dict[str, Dict[str, Any]] | None = None,
) -> PipelineSpec:
    """Load YAML + env/CLI overrides into a validated PipelineSpec."""
    data = _read_yaml(path)
    opts = data.get("options", {})
    sources: Iterable[Dict[str, Dict[str, Any]]] = (
        d for d in (opts, _env_overrides(), overrides) if d
    )
    acc: Dict[str, Dict[str, Any]] = {}
    merged = reduce(_merge_options, sources, acc)

    pipeline = data.get("pipeline") or list(DEFAULT_PIPELINE)
    _warn_unknown_options(pipeline, merged)
    data = {**data, "pipeline": pipeline, "options": merged}
    return PipelineSpec.model_validate(data)


def _first_env(*names: str) -> str | None:
    return next((os.environ[n] for n in names if os.environ.get(n)), None)


def load_server_settings(
    dotenv_path: str | os.PathLike | None = None,
) -> ServerSettings:
    """Build ``ServerSettings`` from the environment, reading ``.env`` first."""
    load_dotenv(dotenv_path)
    raw = {
        "host": _first_env("PDF_TO_TEXT_HOST", "HOST"),
        "port": _first_env("PDF_TO_TEXT_PORT", "PORT"),
        "max_upload_mb": _first_env("PDF_TO_TEXT_MAX_UPLOAD_MB"),
        "cors_origins": (
            [o.strip() for o in origins.split(",") if o.strip()]
            if (origins := _first_env("PDF_TO_TEXT_CORS_ORIGINS"))
            else None
        ),
        "environment": _first_env("PDF_TO_TEXT_ENV", "NODE_ENV"),
    }
    present = {k: v for k, v in raw.items() if v is not None}
    return ServerSettings.model_validate(present)

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Iterator, Mapping
from enum import Enum
from pathlib import Path
from typing import Any, Optional

import typer

from pdf_to_text.config import PipelineSpec, load_spec
from pdf_to_text.core import PIPELINE_YAML, build_result, convert_pdf, run_inspect

LOG_FORMAT = "[%(levelname)s] %(name)s:%(funcName)s - %(message)s"


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def _spec_path_candidates(path: str | Path) -> Iterator[Path]:
    """Yield potential spec locations without hitting the filesystem."""
    candidate = Path(path)
    pkg_dir = Path(__file__).resolve().parent
    yield from (
        candidate,
        pkg_dir.parent / candidate,
        pkg_dir / candidate,
    )


def _resolve_spec_path(path: str | Path | None) -> Path:
    """Pick the first existing pipeline spec, falling back to the packaged one."""
    if path is None:
        return PIPELINE_YAML
    return next((p for p in _spec_path_candidates(path) if p.exists()), Path(path))


def _format_timings(timings: Mapping[str, float]) -> str:
    """Return ``timings`` as newline-delimited ``name: seconds`` strings."""
    return "\n".join(f"{n}: {t:.4f}s" for n, t in timings.items())


def _exit_with_error(exc: Exception) -> None:
    """Print ``exc`` to stderr and exit with status 1."""
    print(f"error: {exc}", file=sys.stderr)
    raise typer.Exit(1)


def _safe(func: Callable[[], None]) -> None:
    """Invoke ``func`` and exit non-zero on any exception."""
    try:
        func()
    except Exception as exc:
        _exit_with_error(exc)


def _cli_overrides(
    max_frequency: int | None, max_length: int | None
) -> dict[str, dict[str, Any]]:
    filter_opts: dict[str, Any] = {
        k: v
        for k, v in {"max_frequency": max_frequency, "max_length": max_length}.items()
        if v is not None
    }
    return {"filter_repeated_lines": filter_opts} if filter_opts else {}


def _load(
    spec: str | None, overrides: dict[str, dict[str, Any]] | None = None
) -> PipelineSpec:
    return load_spec(_resolve_spec_path(spec), overrides=overrides)


def _render(text: str, input_path: Path, fmt: OutputFormat) -> str:
    if fmt is OutputFormat.json:
        result = build_result(text, input_path.name)
        return json.dumps(result.model_dump(), ensure_ascii=False, indent=2)
    return text


def _run_convert(
    input_path: Path,
    out: Path | None,
    fmt: OutputFormat,
    spec: str | None,
    max_frequency: int | None,
    max_length: int | None,
    verbose: bool,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format=LOG_FORMAT)
    s = _load(spec, _cli_overrides(max_frequency, max_length))
    timings: dict[str, float] = {}
    text = convert_pdf(input_path, s, timings)
    rendered = _render(text, input_path, fmt)
    if out:
        out.write_text(rendered + "\n", encoding="utf-8")
    else:
        print(rendered)
    if verbose:
        print(_format_timings(timings), file=sys.stderr)


def _run_inspect(spec: str | None) -> None:
    print(json.dumps(run_inspect(_load(spec)), indent=2))


def _run_serve(host: str | None, port: int | None) -> None:
    import uvicorn

    from pdf_to_text.config import load_server_settings
    from pdf_to_text.server import create_app

    settings = load_server_settings()
    settings = settings.model_copy(
        update={k: v for k, v in {"host": host, "port": port}.items() if v is not None}
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command()
def convert(
    input_path: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        readable=True,
    ),
    out: Optional[Path] = typer.Option(None, "--out"),
    fmt: OutputFormat = typer.Option(OutputFormat.text, "--format"),
    spec: Optional[str] = typer.Option(None, "--spec"),
    max_frequency: Optional[int] = typer.Option(None, "--max-frequency", min=1),
    max_length: Optional[int] = typer.Option(None, "--max-length", min=1),
    verbose: bool = typer.Option(False, "--verbose"),
) -> None:
    """Convert a PDF into clean plain text."""
    _safe(
        lambda: _run_convert(
            input_path,
            out,
            fmt,
            spec,
            max_frequency,
            max_length,
            verbose,
        )
    )


@app.command()
def inspect(spec: Optional[str] = typer.Option(None, "--spec")) -> None:
    """Show registered passes and the resolved pipeline."""
    _safe(lambda: _run_inspect(spec))


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
) -> None:
    """Run the HTTP upload service."""
    _run_serve(host, port)


if __name__ == "__main__":
    app()

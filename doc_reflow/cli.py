from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path
from typing import Any

import typer

from doc_reflow.config import load_spec
from doc_reflow.core import run_format, run_inspect
from doc_reflow.processing_log import render_log


def _spec_path_candidates(path: str | Path) -> Iterator[Path]:
    """Yield potential spec locations without hitting the filesystem."""
    candidate = Path(path)
    pkg_dir = Path(__file__).resolve().parent
    yield from (
        candidate,
        pkg_dir.parent / candidate,
        pkg_dir / candidate,
    )


def _resolve_spec_path(path: str | Path) -> Path:
    """Pick the first existing pipeline spec from candidate locations."""
    return next((p for p in _spec_path_candidates(path) if p.exists()), Path(path))


def _format_timings(timings: Mapping[str, float]) -> str:
    """Return ``timings`` as newline-delimited ``name: seconds`` strings."""
    return "\n".join(f"{n}: {t:.3f}s" for n, t in timings.items())


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
    strict: bool | None,
    scan_order: str | None,
    keep_footnotes_inline: bool,
) -> dict[str, dict[str, Any]]:
    reflow_opts: dict[str, Any] = {
        k: v for k, v in {"strict_structural_detection": strict}.items() if v is not None
    }
    footnote_opts: dict[str, Any] = {
        k: v
        for k, v in {
            "scan_order": scan_order,
            "move_to_end": False if keep_footnotes_inline else None,
        }.items()
        if v is not None
    }
    return {
        k: v
        for k, v in {
            "reflow": reflow_opts,
            "extract_footnotes": footnote_opts,
        }.items()
        if v
    }


def _read_input(input_path: str) -> str:
    if input_path == "-":
        return sys.stdin.read()
    return Path(input_path).read_text(encoding="utf-8")


def _write_output(text: str, out: Path | None) -> None:
    if out is None:
        sys.stdout.write(text + "\n")
        return
    out.write_text(text + "\n", encoding="utf-8")
    print("format: OK")


def _run_format(
    input_path: str,
    out: Path | None,
    spec: str,
    verbose: bool,
    strict: bool | None,
    scan_order: str | None,
    keep_footnotes_inline: bool,
) -> None:
    if verbose:
        logging.basicConfig(level=logging.DEBUG, stream=sys.stderr)
    s = load_spec(
        _resolve_spec_path(spec),
        overrides=_cli_overrides(strict, scan_order, keep_footnotes_inline),
    )
    artifact, timings = run_format(_read_input(input_path), s)
    _write_output(artifact.payload, out)
    if verbose:
        print(render_log((artifact.meta or {}).get("processing_log", [])), file=sys.stderr)
        print(_format_timings(timings), file=sys.stderr)


def _run_inspect() -> None:
    print(json.dumps(run_inspect(), indent=2))


app = typer.Typer(add_completion=False, no_args_is_help=True)


@app.command("format")
def format_command(
    input_path: str = typer.Argument(..., help="UTF-8 text file, or '-' for stdin."),
    out: Path | None = typer.Option(None, "--out"),
    spec: str = typer.Option("pipeline.yaml", "--spec"),
    verbose: bool = typer.Option(False, "--verbose"),
    strict: bool | None = typer.Option(None, "--strict/--no-strict"),
    scan_order: str | None = typer.Option(None, "--scan-order"),
    keep_footnotes_inline: bool = typer.Option(False, "--keep-footnotes-inline"),
) -> None:
    _safe(
        lambda: _run_format(
            input_path,
            out,
            spec,
            verbose,
            strict,
            scan_order,
            keep_footnotes_inline,
        )
    )


@app.command()
def inspect() -> None:
    _run_inspect()


if __name__ == "__main__":
    app()

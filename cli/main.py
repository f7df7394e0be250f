"""Quiz solver CLI: entry-point for running and debugging the pipeline.

Usage:
    python cli/main.py --help

Commands:
    serve     → run the HTTP acceptance server (uvicorn)
    solve     → run one task in-process and print its report
    decode    → run the decoder + resolver over a saved page text
    answer    → run the answer engine over a local PDF
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that
# `from quizsolver.xxx import ...` works when the CLI is invoked as
# `python cli/main.py` from any working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import asyncio
import dataclasses
import logging
from typing import Optional

import typer

from quizsolver.config import settings

app = typer.Typer(
    name="quizsolver",
    help="Quiz solver CLI.",
    no_args_is_help=True,
)


def _configure_logging() -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---------------------------------------------------------------------------
# Server
# ---------------------------------------------------------------------------
@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, help="Bind address (default: HOST or 0.0.0.0)."),
    port: Optional[int] = typer.Option(None, help="Port (default: PORT or 3000)."),
) -> None:
    """Run the task acceptance server."""
    import uvicorn

    _configure_logging()
    uvicorn.run(
        "quizsolver.api.app:app",
        host=host or settings.host,
        port=port or settings.port,
        log_level=settings.log_level.lower(),
    )


# ---------------------------------------------------------------------------
# Pipeline
# ---------------------------------------------------------------------------
@app.command("solve")
def solve(
    url: str = typer.Option(..., help="Quiz page URL."),
    email: str = typer.Option(..., help="Email to submit with the answer."),
    secret: Optional[str] = typer.Option(None, help="Shared secret (default: SECRET)."),
) -> None:
    """Run one task end to end and print its report."""
    from quizsolver.pipeline import TaskOrchestrator, TaskOutcome, TaskRequest

    _configure_logging()
    task = TaskRequest(email=email, secret=secret or settings.secret, url=url)
    typer.echo(f"[solve] Solving {url!r} …")
    report = asyncio.run(TaskOrchestrator(settings).process(task))

    typer.echo(f"[solve] Outcome : {report.outcome.value}")
    typer.echo(f"[solve] Elapsed : {report.elapsed:.1f}s")
    if report.answer is not None:
        typer.echo(f"[solve] Answer  : {report.answer.value}  (sum {report.answer.total})")
    if report.submission is not None:
        typer.echo(
            f"[solve] Submit  : {report.submission.endpoint} → "
            f"HTTP {report.submission.status_code} {report.submission.body!r}"
        )
    if report.error:
        typer.echo(f"[solve] Error   : {report.error}")

    if report.outcome not in (TaskOutcome.SUBMITTED, TaskOutcome.NO_PAYLOAD,
                              TaskOutcome.NO_INSTRUCTION, TaskOutcome.UNSUPPORTED_RESOURCE):
        raise typer.Exit(1)


@app.command("decode")
def decode(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="File holding page text."),
) -> None:
    """Find the base64 payload in a saved page text and resolve its instruction."""
    from quizsolver.pipeline.decoder import decode as decode_extract
    from quizsolver.pipeline.models import PageExtract
    from quizsolver.pipeline.resolver import resolve

    extract = PageExtract(body_text=path.read_text(encoding="utf-8"))
    payload = decode_extract(
        extract,
        markers=settings.marker_substrings,
        min_length=settings.min_payload_length,
    )
    if payload is None:
        typer.echo("[decode] No payload found.")
        raise typer.Exit(1)

    label = "marker match" if payload.plausible else "fallback"
    typer.echo(f"[decode] Candidate #{payload.index} ({label})")
    typer.echo(payload.text)

    instruction = resolve(payload)
    if instruction is None:
        typer.echo("[decode] No structured instruction found.")
        return
    typer.echo(f"[decode] Resource : {instruction.resource_url}")
    typer.echo(f"[decode] Submit   : {instruction.submission_url or settings.default_submit_url}")


@app.command("answer")
def answer(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Local PDF file."),
) -> None:
    """Compute the answer for a local PDF without fetching or submitting."""
    from quizsolver.pipeline.answer import AnswerEngine
    from quizsolver.pipeline.models import FetchedResource, ResourceKind

    resource = FetchedResource(
        url=path.resolve().as_uri(),
        content=path.read_bytes(),
        content_type="application/pdf",
        kind=ResourceKind.PDF,
    )
    result = asyncio.run(AnswerEngine().compute_answer(resource))
    typer.echo(f"[answer] Numbers : {result.numbers_found}")
    typer.echo(f"[answer] Sum     : {result.total}")
    typer.echo(f"[answer] Answer  : {result.value}")


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------
@app.command("config")
def show_config() -> None:
    """Print the effective settings (secret masked)."""
    for f in dataclasses.fields(settings):
        value = getattr(settings, f.name)
        if f.name == "secret":
            value = "***" if value else "(unset)"
        typer.echo(f"  {f.name:<20} {value}")


if __name__ == "__main__":
    app()

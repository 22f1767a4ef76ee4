from __future__ import annotations

import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from jimaku.config import get_settings
from jimaku.doctor import run_doctor
from jimaku.errors import JimakuError
from jimaku.export import json as json_export
from jimaku.services import EXPORT_FORMATS, JimakuService

app = typer.Typer(help="jimaku - SRT subtitles from audio with Gemini")
console = Console()
err_console = Console(stderr=True)


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _build_service(model: str | None) -> JimakuService:
    settings = get_settings()
    if model:
        settings = settings.model_copy(update={"model": model})
    return JimakuService(settings)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    configure_logging(verbose)


@app.command()
def doctor() -> None:
    """Check runtime prerequisites."""

    checks = run_doctor(get_settings())

    table = Table(title="jimaku doctor")
    table.add_column("Check")
    table.add_column("Status")
    table.add_column("Detail")

    failed = False
    for check in checks:
        status = check.status.upper()
        color = {"ok": "green", "warn": "yellow", "fail": "red"}.get(check.status, "white")
        table.add_row(check.name, f"[{color}]{status}[/{color}]", check.detail)
        if check.status == "fail":
            failed = True

    console.print(table)
    if failed:
        raise typer.Exit(code=1)


@app.command()
def transcribe(
    file_path: Path = typer.Argument(..., exists=True, dir_okay=False, readable=True),
    reference: Path | None = typer.Option(
        None,
        "--reference",
        "-r",
        exists=True,
        dir_okay=False,
        readable=True,
        help="Reference transcript (.txt) used to correct the transcription.",
    ),
    output: Path | None = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file or directory. Prints to stdout when omitted.",
    ),
    export_format: str = typer.Option("srt", "--format", help="srt|json"),
    model: str | None = typer.Option(None, "--model", help="Gemini model name."),
    mime_type: str | None = typer.Option(None, "--mime-type", help="Override the detected MIME type."),
) -> None:
    """Transcribe an audio file into SRT subtitles."""

    if export_format.lower().strip() not in EXPORT_FORMATS:
        err_console.print(f"[red]transcribe failed:[/red] unsupported format '{escape(export_format)}'")
        raise typer.Exit(code=2)

    try:
        service = _build_service(model)
        outcome = service.transcribe_file(file_path, reference_file=reference, mime_type=mime_type)
    except JimakuError as exc:
        err_console.print(f"[red]transcribe failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc

    if output is None:
        if export_format.lower().strip() == "srt":
            typer.echo(outcome.srt, nl=False)
        else:
            payload = json_export.build_payload(outcome.source_name, outcome.model, outcome.segments)
            typer.echo(json_export.dumps_payload(payload))
        return

    try:
        written = service.export(outcome, output, export_format=export_format)
    except (OSError, ValueError) as exc:
        err_console.print(f"[red]export failed:[/red] {escape(str(exc))}")
        raise typer.Exit(code=2) from exc
    err_console.print(f"[green]Segments:[/green] {outcome.segment_count}")
    err_console.print(f"[green]Export written:[/green] {written}")


@app.command()
def ui(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(7860, "--port"),
) -> None:
    """Launch the local Gradio UI."""

    from jimaku.ui.gradio_app import build_app

    demo = build_app()
    demo.launch(server_name=host, server_port=port, share=False, show_error=True)


if __name__ == "__main__":
    app()

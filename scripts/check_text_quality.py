#!/usr/bin/env python3
"""
Check whether PDF-extracted text is usable for parsing.

Exit code 0 for ok/warning, 1 when the text is too garbled.

Usage:
    python scripts/check_text_quality.py extracted.txt
"""

from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv

from anken.contexts.intake.logger import _log_error, _log_success, setup_intake_logger
from anken.contexts.intake.text_quality import QualityThresholds, assess_text_quality
from anken.utils.config import load_settings

load_dotenv()

app = typer.Typer(help="Quality check for extracted posting text.")

STATUS_COLORS = {
    "ok": typer.colors.GREEN,
    "warning": typer.colors.YELLOW,
    "fatal": typer.colors.RED,
}


@app.command()
def main(
    text_file: Path = typer.Argument(..., help="UTF-8 file with the extracted text"),
    config: Path = typer.Option(None, "--config", help="Settings YAML (default: ANKEN_CONFIG_PATH)"),
    log_dir: Path = typer.Option(None, "--log-dir", help="Write a session log to this directory"),
):
    """Report readable/weird character ratios and the resulting verdict."""
    if not text_file.exists():
        typer.echo(f"ERROR: File not found: {text_file}", err=True)
        raise typer.Exit(1)

    if log_dir is not None:
        setup_intake_logger(log_dir / f"quality_{datetime.now():%Y%m%d_%H%M%S}", source="pdf")

    settings = load_settings(config)
    text = text_file.read_text(encoding="utf-8", errors="replace")
    report = assess_text_quality(text, QualityThresholds(**settings.quality))

    typer.echo(f"Length: {report.length}")
    typer.echo(f"Readable ratio: {report.readable_ratio:.2f}")
    typer.echo(f"Weird ratio: {report.weird_ratio:.2f}")

    verdict = report.status.upper()
    if report.reason:
        verdict += f" ({report.reason})"
    typer.secho(verdict, fg=STATUS_COLORS[report.status])

    if report.is_fatal:
        _log_error(f"{text_file.name}: text rejected ({report.reason})")
        raise typer.Exit(1)
    _log_success(f"{text_file.name}: text usable ({report.status})")


if __name__ == "__main__":
    app()

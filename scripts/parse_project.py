#!/usr/bin/env python3
"""
Parse a job posting text file and show the extracted fields.

Usage:
    python scripts/parse_project.py posting.txt
    python scripts/parse_project.py posting.txt --json
    python scripts/parse_project.py posting.txt --ai --log-dir outs/logs
"""

import json
from datetime import datetime
from pathlib import Path

import typer
from dotenv import load_dotenv

from anken.contexts.autofill.logger import setup_autofill_logger
from anken.contexts.autofill.session import AutofillSession
from anken.contexts.intake.project_data_structure import FIELD_ALIASES

load_dotenv()

app = typer.Typer(help="Parse a job posting into form fields.")


@app.command()
def main(
    posting_file: Path = typer.Argument(..., help="UTF-8 text file with the posting"),
    ai: bool = typer.Option(False, "--ai", help="Fill remaining fields via the AI endpoint"),
    as_json: bool = typer.Option(False, "--json", help="Print the form record as JSON"),
    log_dir: Path = typer.Option(None, "--log-dir", help="Write a session log to this directory"),
):
    """Parse a posting and display the draft and the resulting form record."""
    if not posting_file.exists():
        typer.echo(f"ERROR: File not found: {posting_file}", err=True)
        raise typer.Exit(1)

    if log_dir is not None:
        session_dir = log_dir / f"parse_{datetime.now():%Y%m%d_%H%M%S}"
        setup_autofill_logger(session_dir, use_ai=ai)

    text = posting_file.read_text(encoding="utf-8")
    session = AutofillSession()
    result = session.autofill(text, use_ai=ai)
    record = session.form.to_record()

    if as_json:
        typer.echo(json.dumps(record, ensure_ascii=False, indent=2))
        raise typer.Exit(0)

    typer.echo(f"Parsing {posting_file}")

    draft = result.draft
    detected = draft.detected_fields()
    typer.echo(f"\n=== Detected fields ({len(detected)}) ===")
    for name, value in draft.to_dict().items():
        if isinstance(value, str) and "\n" in value:
            value = value.replace("\n", " | ")
        typer.echo(f"  {name}: {value}")

    missing = [FIELD_ALIASES[name] for name in draft.missing_fields()]
    typer.echo(f"\n=== Not detected ({len(missing)}) ===")
    typer.echo(f"  {', '.join(missing)}" if missing else "  None")

    if ai:
        typer.echo(f"\nAI normalization applied: {'yes' if result.used_ai else 'no'}")

    if result.warnings:
        typer.echo("\n=== Warnings ===")
        for w in result.warnings:
            typer.echo(f"  ! {w}")

    typer.secho("\nParsing finished", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()

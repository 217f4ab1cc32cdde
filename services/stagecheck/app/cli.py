"""Command-line entry point for checking plan files.

Usage:
    stagecheck check plan.json
    stagecheck check docs/implementation-plan.md --format json
    cat plan.json | stagecheck check - --input json
    stagecheck rules

Exit codes: 0 when the plan is valid, 1 when violations were found,
2 when the input could not be read as a plan.
"""
from __future__ import annotations

import json
import sys
from enum import Enum
from pathlib import Path

import typer

from .config import get_settings
from .domain.checker_service import PlanChecker
from .domain.errors import InvalidPlanInput
from .domain.report import format_report, report_to_dict
from .observability.logs import configure_logging

EXIT_VALID = 0
EXIT_VIOLATIONS = 1
EXIT_INVALID_INPUT = 2

_MARKDOWN_SUFFIXES = {".md", ".markdown"}

app = typer.Typer(help="Check implementation plans for dependency and completion-criteria problems")


class InputFormat(str, Enum):
    auto = "auto"
    json = "json"
    markdown = "markdown"


class OutputFormat(str, Enum):
    text = "text"
    json = "json"


def _read_source(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    return Path(path).read_text(encoding="utf-8")


def _resolve_input(path: str, requested: InputFormat) -> InputFormat:
    if requested is not InputFormat.auto:
        return requested
    if path != "-" and Path(path).suffix.lower() in _MARKDOWN_SUFFIXES:
        return InputFormat.markdown
    return InputFormat.json


@app.command()
def check(
    path: str = typer.Argument(..., help="Plan file (JSON or markdown), or '-' for stdin"),
    input_format: InputFormat = typer.Option(InputFormat.auto, "--input", help="How to read the plan"),
    output_format: OutputFormat = typer.Option(OutputFormat.text, "--format", help="Report rendering"),
) -> None:
    """Validate a plan and exit non-zero when it breaks a structural rule."""
    settings = get_settings()
    configure_logging(settings)
    checker = PlanChecker(settings)

    try:
        text = _read_source(path)
    except (OSError, UnicodeDecodeError) as exc:
        typer.echo(f"Cannot read {path}: {exc}", err=True)
        raise typer.Exit(EXIT_INVALID_INPUT)

    try:
        if _resolve_input(path, input_format) is InputFormat.markdown:
            report = checker.check_markdown(text)
        else:
            try:
                document = json.loads(text)
            except json.JSONDecodeError as exc:
                raise InvalidPlanInput(f"not valid JSON ({exc.msg})", f"line {exc.lineno}") from exc
            report = checker.check_document(document)
    except InvalidPlanInput as exc:
        typer.echo(f"{InvalidPlanInput.kind}: {exc}", err=True)
        raise typer.Exit(EXIT_INVALID_INPUT)

    if output_format is OutputFormat.json:
        typer.echo(json.dumps(report_to_dict(report), indent=2))
    else:
        typer.echo(format_report(report))
    raise typer.Exit(EXIT_VALID if report.valid else EXIT_VIOLATIONS)


@app.command()
def rules() -> None:
    """Show the subjective terms that make a completion criterion vague."""
    checker = PlanChecker(get_settings())
    typer.echo("Vague terms:")
    for term in sorted(checker.rules.terms):
        typer.echo(f"  {term}")
    typer.echo("Ignored filler words: " + ", ".join(sorted(checker.rules.filler)))


def main() -> None:  # pragma: no cover - console script
    app()


if __name__ == "__main__":  # pragma: no cover
    main()

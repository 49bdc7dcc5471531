from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, NoReturn

import typer

from storygraph.config import configure_logging
from storygraph.modules.story.service import (
    format_issue_line,
    format_summary_block,
    has_errors,
    normalize_and_audit,
)

app = typer.Typer(help="Validate a branching story JSON file", add_completion=False)
logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_STORY_ERRORS = 1
EXIT_USAGE = 2

USAGE = "Usage: storygraph-validate path/to/story.json"


def read_json_file(path: Path) -> Any:
    return json.loads(path.read_text(encoding="utf-8"))


def _fail(message: str) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=EXIT_USAGE)


@app.command()
def validate(
    path: str | None = typer.Argument(None, help="Story JSON file to audit"),
    json_output: bool = typer.Option(False, "--json", help="Print the audit result as JSON"),
    log_level: str | None = typer.Option(None, "--log-level", help="Override LOG_LEVEL"),
) -> None:
    configure_logging(log_level)
    if not path:
        typer.echo(USAGE)
        raise typer.Exit(code=EXIT_USAGE)

    fp = Path(path).expanduser().resolve()
    if not fp.is_file():
        _fail(f"File not found: {fp}")

    try:
        raw = read_json_file(fp)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        logger.debug("failed to load %s", fp, exc_info=True)
        _fail(f"Failed to read/parse JSON: {exc}")

    report = normalize_and_audit(raw)
    if report is None:
        typer.echo("Normalization failed: story is not an object.", err=True)
        raise typer.Exit(code=EXIT_STORY_ERRORS)

    result = report.result
    exit_code = EXIT_STORY_ERRORS if has_errors(result) else EXIT_OK

    if json_output:
        typer.echo(json.dumps(result.model_dump(mode="json"), ensure_ascii=False, indent=2))
        raise typer.Exit(code=exit_code)

    typer.echo("Story Graph Audit")
    typer.echo(f"File: {fp}")
    if not result.issues:
        typer.echo("No issues found.")
    for issue in result.issues:
        typer.echo(format_issue_line(issue))
    typer.echo("")
    for line in format_summary_block(result.summary):
        typer.echo(line)
    typer.echo("")
    raise typer.Exit(code=exit_code)


def main() -> None:
    app()


if __name__ == "__main__":
    main()

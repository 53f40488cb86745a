"""Command-line interface for eventsplit."""

import re
import sys
from contextlib import ExitStack
from pathlib import Path

import typer
from rich.console import Console
from rich.markup import escape

from eventsplit import __version__
from eventsplit.config import (
    DEFAULT_FIELD,
    SplitConfig,
    load_settings,
)
from eventsplit.exceptions import SplitError
from eventsplit.logging_config import setup_logging
from eventsplit.pipeline import Pipeline, SplitFilter
from eventsplit.splitting import Splitter
from eventsplit.storage.jsonl import read_documents, write_documents

app = typer.Typer(
    name="eventsplit",
    help="Split one JSON Lines document into many by one of its fields.",
)
console = Console(stderr=True)

_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "0": "\0", "\\": "\\"}
_ESCAPE_PATTERN = re.compile(r"\\(.)")


def decode_escapes(text: str) -> str:
    """Interpret \\n, \\t, \\r, \\0 and \\\\ in a command-line argument."""
    return _ESCAPE_PATTERN.sub(lambda m: _ESCAPES.get(m.group(1), m.group(0)), text)


def _run(
    pipeline: Pipeline,
    input_path: Path | None,
    output_path: Path | None,
    include_metadata: bool,
) -> None:
    with ExitStack() as stack:
        source = (
            stack.enter_context(input_path.open("r", encoding="utf-8"))
            if input_path
            else sys.stdin
        )
        sink = (
            stack.enter_context(output_path.open("w", encoding="utf-8"))
            if output_path
            else sys.stdout
        )
        write_documents(pipeline.run(read_documents(source)), sink, include_metadata)

    stats = pipeline.stats
    console.print(
        f"[dim]{stats.received} in, {stats.emitted} out, {stats.suppressed} split[/dim]"
    )


@app.command()
def split(
    input_path: Path | None = typer.Argument(
        None,
        help="JSON Lines file to read (default: stdin)",
        exists=True,
        dir_okay=False,
    ),
    field: str = typer.Option(DEFAULT_FIELD, "--field", "-f", help="Field to split"),
    target: str | None = typer.Option(
        None, "--target", "-t", help="Field to write each element to (default: --field)"
    ),
    terminator: str = typer.Option(
        "\\n", "--terminator", help="Separator for string fields; \\n and \\t are understood"
    ),
    merge_hash: bool = typer.Option(
        False, "--merge-hash", help="Merge object elements into the root or the target"
    ),
    delete_field: bool = typer.Option(
        False, "--delete-field", help="Remove the source field unless it holds the result"
    ),
    include_metadata: bool = typer.Option(
        False, "--include-metadata", help="Write metadata (split_index) under @metadata"
    ),
    output_path: Path | None = typer.Option(
        None, "--output", "-o", help="File to write to (default: stdout)"
    ),
    log_level: str = typer.Option(
        "WARNING", "--log-level", envvar="EVENTSPLIT_LOG_LEVEL", help="Logging level"
    ),
) -> None:
    """Split each document of a JSON Lines stream."""
    logger = setup_logging(log_level)
    try:
        config = SplitConfig(
            terminator=decode_escapes(terminator),
            field=field,
            target=target,
            merge_hash=merge_hash,
            delete_field=delete_field,
        )
    except ValueError as e:
        console.print(f"[bold red]Invalid options:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e

    pipeline = Pipeline([SplitFilter(Splitter(config, logger=logger))], logger=logger)
    try:
        _run(pipeline, input_path, output_path, include_metadata)
    except SplitError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.command()
def run(
    config_path: Path = typer.Argument(..., help="Pipeline settings YAML file"),
    input_path: Path | None = typer.Argument(
        None,
        help="JSON Lines file to read (default: stdin)",
        exists=True,
        dir_okay=False,
    ),
    include_metadata: bool = typer.Option(
        False, "--include-metadata", help="Write metadata under @metadata"
    ),
    output_path: Path | None = typer.Option(
        None, "--output", "-o", help="File to write to (default: stdout)"
    ),
) -> None:
    """Run a pipeline described by a settings file."""
    try:
        settings = load_settings(config_path)
        logger = setup_logging(settings.log_level)
        pipeline = Pipeline.from_settings(settings, logger=logger)
        _run(pipeline, input_path, output_path, include_metadata)
    except SplitError as e:
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        raise typer.Exit(1) from e


@app.command()
def version() -> None:
    """Show version information."""
    console.print(f"eventsplit {__version__}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()

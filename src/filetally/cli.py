"""Command-line interface for filetally"""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from . import __version__
from .config import load_config
from .exceptions import FileTallyError
from .formatters import FORMATTERS, get_formatter
from .logging_config import setup_logging
from .report import rank_labels
from .scanning import TreeScanner

app = typer.Typer(
    name="filetally",
    help="filetally - rank the content types found in a directory tree",
    add_completion=False,
    rich_markup_mode="rich",
)

CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}

console = Console(stderr=True)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"[bold cyan]filetally[/bold cyan] version [green]{__version__}[/green]")
        raise typer.Exit(0)


@app.command(context_settings=CONTEXT_SETTINGS)
def scan(
    path: Path = typer.Argument(
        ...,
        help="Root directory to scan",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-n",
        "--workers",
        help="Worker budget (default: hardware parallelism, 0 = sequential)",
        min=0,
    ),
    top: Optional[int] = typer.Option(
        None,
        "--top",
        "-t",
        help="Number of file types to report (default: 10)",
        min=1,
    ),
    fmt: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format: text (default), rich, json, csv",
    ),
    join_mode: Optional[str] = typer.Option(
        None,
        "--join-mode",
        help="deferred (default): start all subdirectories before joining; "
        "immediate: join each subdirectory as soon as it is started",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file path (TOML format)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose (DEBUG) logging",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress all but ERROR logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
        callback=_version_callback,
        is_eager=True,
    ),
):
    """
    Classify every regular file under PATH and report the most common types.

    Symlinks are counted, never followed. Unreadable entries are counted as
    [italic]walk-error[/italic] and files that cannot be classified as
    [italic]classify-error[/italic]; neither stops the scan.

    [bold cyan]Examples:[/bold cyan]

      filetally /usr/share

      filetally -n 0 ~/src

      filetally . --format json | jq .totals
    """
    if verbose and quiet:
        console.print("[red]Error:[/red] --verbose and --quiet are mutually exclusive")
        raise typer.Exit(1)

    if fmt not in FORMATTERS:
        console.print(f"[red]Error:[/red] --format must be one of: {', '.join(sorted(FORMATTERS))}")
        raise typer.Exit(1)

    try:
        logger = setup_logging(verbose=verbose, quiet=quiet, log_file=log_file)
    except FileTallyError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    try:
        settings = load_config(
            config_file=config,
            workers=workers,
            top=top,
            join_mode=join_mode,
            verbose=verbose,
            quiet=quiet,
        )
        logger.debug(f"Loaded config: {settings}")

        result = TreeScanner(settings).scan(path)
        ranked = rank_labels(result.label_counts, limit=settings.top)
        get_formatter(fmt).render(ranked, result)

    except FileTallyError as e:
        logger.debug(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Scan interrupted by user")
        console.print("\n[yellow]Scan interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during scan")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def main() -> None:
    """Console-script entry point."""
    app()


if __name__ == "__main__":
    main()

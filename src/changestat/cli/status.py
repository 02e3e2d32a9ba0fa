"""Status command - staged and unstaged change counts for each path.

Runs two comparisons, the working copy against the index and the index
against HEAD (or the empty tree before the first commit), and prints one
numbered row per changed path.
"""

import sys
from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from .. import __version__
from ..config import load_config
from ..exceptions import ChangestatError, ConfigurationError
from ..git import GitRepository
from ..logging_config import setup_logging
from ..status import ChangeCollector, ChangeRecordStore
from . import app
from ._common import ExitCode, build_reporter, color_override, console


@app.command()
def status(
    ctx: typer.Context,
    pathspec: Optional[List[str]] = typer.Argument(
        None,
        help="Limit the report to paths matching these pathspecs",
        show_default=False,
    ),
    show_status: bool = typer.Option(
        False,
        "--status",
        help="Print status information with diffstat",
    ),
    path: Path = typer.Option(
        Path("."),
        "-C",
        "--path",
        help="Run as if started in this directory",
        exists=True,
        file_okay=False,
        dir_okay=True,
    ),
    color: Optional[bool] = typer.Option(
        None,
        "--color/--no-color",
        help="Force header colour on or off (default: color.interactive, then auto)",
        show_default=False,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        hidden=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log git commands and collection details to stderr",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
) -> None:
    """
    Show staged and unstaged line counts for every changed path.

    [bold cyan]Examples:[/bold cyan]

      changestat --status

      changestat --status --no-color -- src/

      changestat -C /path/to/repo --status
    """
    if version:
        typer.echo(f"changestat version {__version__}")
        raise typer.Exit(ExitCode.SUCCESS)

    repo_path = path.resolve()

    try:
        # Colour settings are read before the mode is checked, so a broken
        # setting fails every invocation.
        settings = load_config(
            config_file=config,
            repo_path=repo_path,
            use_color=color_override(color),
            verbose=verbose,
        )
    except ConfigurationError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(ExitCode.ERROR)

    logger = setup_logging(
        verbose=settings.verbosity == "verbose",
        quiet=settings.verbosity == "quiet",
    )

    if not show_status:
        typer.echo(ctx.get_usage(), err=True)
        typer.echo(f"Try '{ctx.command_path} --help' for help.", err=True)
        raise typer.Exit(ExitCode.USAGE)

    try:
        repo = GitRepository(str(repo_path), timeout=settings.git_timeout_seconds)
        store = ChangeRecordStore()
        if not ChangeCollector(repo, pathspec=pathspec).run(store):
            raise typer.Exit(ExitCode.SUCCESS)

        reporter = build_reporter(settings, sys.stdout)
        reporter.emit(store, sys.stdout.buffer)

    except typer.Exit:
        raise
    except ChangestatError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(ExitCode.ERROR)
    except Exception as e:
        logger.exception("Unexpected error in status")
        console.print(f"[red]Unexpected error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(ExitCode.ERROR)

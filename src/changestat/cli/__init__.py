"""CLI entry point - registers the status command."""

import typer

app = typer.Typer(
    name="changestat",
    help="changestat - staged and unstaged line counts per changed file",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command module to register it
from .status import status as _status  # noqa: F401, E402


def main() -> None:
    app()

"""Shared CLI helpers."""

from typing import IO, Optional

from rich.console import Console

from ..color import color_enabled, detect_color_system
from ..config import ReportConfig
from ..status import Reporter

# stdout carries the report; messages go to stderr
console = Console(stderr=True)


class ExitCode:
    """Exit statuses of the changestat command."""

    SUCCESS = 0
    ERROR = 1
    USAGE = 129


def color_override(color: Optional[bool]) -> Optional[str]:
    """Map ``--color/--no-color`` onto a ``use_color`` setting."""
    if color is None:
        return None
    return "always" if color else "never"


def build_reporter(config: ReportConfig, stream: Optional[IO[str]] = None) -> Reporter:
    """Reporter decorated according to *config* for output on *stream*."""
    color_system = None
    if color_enabled(config.use_color, stream):
        color_system = detect_color_system(stream)
    return Reporter(
        header_style=config.style_for("header"),
        color_system=color_system,
        column_width=config.column_width,
    )

"""Git access layer - the diff engine and reference resolution behind the collector."""

from .numstat import parse_numstat
from .repository import EMPTY_TREE_SHA, GitRepository

__all__ = [
    "EMPTY_TREE_SHA",
    "GitRepository",
    "parse_numstat",
]

"""Interface the collector uses to reach the diff engine."""

from abc import ABC, abstractmethod
from typing import Iterable, Optional, Sequence

from .models import DiffEvent


class DiffSource(ABC):
    """Where change events come from."""

    @abstractmethod
    def load_index(self) -> int:
        """Load the staged snapshot; raise ``IndexLoadError`` when unreadable."""

    @abstractmethod
    def resolve_reference(self, name: str = "HEAD") -> str:
        """Return the baseline for the staged phase, or the empty-tree sentinel."""

    @abstractmethod
    def diff_worktree(self, pathspec: Optional[Sequence[str]] = None) -> Iterable[DiffEvent]:
        """Events for the working copy against the staged snapshot."""

    @abstractmethod
    def diff_index(
        self, reference: str, pathspec: Optional[Sequence[str]] = None
    ) -> Iterable[DiffEvent]:
        """Events for the staged snapshot against *reference*."""

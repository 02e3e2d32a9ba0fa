"""Data models for the change-aggregation engine: phases, deltas, per-path records."""

from dataclasses import dataclass, field
from enum import Enum


class Phase(Enum):
    """One of the two comparison passes, in the order they run."""

    WORKTREE = "working-copy-vs-staged"
    INDEX = "staged-vs-reference"


@dataclass(frozen=True)
class Delta:
    """Line-level change magnitude for one path in one phase."""

    added: int = 0
    deleted: int = 0

    def __post_init__(self) -> None:
        if self.added < 0 or self.deleted < 0:
            raise ValueError(
                f"Delta counts must be non-negative, got +{self.added}/-{self.deleted}"
            )

    @property
    def is_zero(self) -> bool:
        """True when no difference was observed."""
        return self.added == 0 and self.deleted == 0

    def describe(self, unchanged_label: str) -> str:
        """Render as ``+added/-deleted``, or *unchanged_label* for the zero delta."""
        if self.is_zero:
            return unchanged_label
        return f"+{self.added}/-{self.deleted}"


NO_CHANGE = Delta()


@dataclass
class ChangeRecord:
    """Everything observed about one path across both phases."""

    path: str
    worktree: Delta = field(default=NO_CHANGE)
    index: Delta = field(default=NO_CHANGE)

    @property
    def sort_key(self) -> bytes:
        """Byte-wise ordering key; undecodable path bytes round-trip via surrogates."""
        return self.path.encode("utf-8", "surrogateescape")


@dataclass(frozen=True)
class DiffEvent:
    """One changed path reported by the diff engine.

    ``binary`` is set when git reports ``-`` for both counts. The numstat
    parser leaves both counts at zero; the git diff source then fills them
    in with the new and old sizes in bytes.
    """

    path: str
    added: int
    deleted: int
    binary: bool = False

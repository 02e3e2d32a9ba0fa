"""
changestat - per-path staged and unstaged change counts for a git working copy.

Two comparisons, the working copy against the index and the index against
HEAD, are merged into one record per path and printed as a sorted table.
"""

__version__ = "0.1.0"

from .status import (
    ChangeCollector,
    ChangeRecord,
    ChangeRecordStore,
    Delta,
    Phase,
    Reporter,
)

__all__ = [
    "ChangeCollector",
    "ChangeRecord",
    "ChangeRecordStore",
    "Delta",
    "Phase",
    "Reporter",
]

"""Path-keyed store of change records."""

from dataclasses import replace
from typing import Dict, Iterator, List, Optional

from .models import ChangeRecord, Delta, Phase


class ChangeRecordStore:
    """Owns one :class:`ChangeRecord` per distinct path.

    Records are created lazily on first sight with both deltas at zero.
    Each ``upsert`` replaces the delta of the given phase only, so repeated
    reports for a path within one phase overwrite rather than accumulate.
    """

    def __init__(self) -> None:
        self._records: Dict[str, ChangeRecord] = {}

    def upsert(self, path: str, phase: Phase, added: int, deleted: int) -> ChangeRecord:
        delta = Delta(added, deleted)
        record = self._records.get(path)
        if record is None:
            record = ChangeRecord(path=path)
            self._records[path] = record

        if phase is Phase.WORKTREE:
            record.worktree = delta
        elif phase is Phase.INDEX:
            record.index = delta
        else:
            raise ValueError(f"Unknown phase: {phase!r}")
        return record

    def size(self) -> int:
        return len(self._records)

    def snapshot(self) -> List[ChangeRecord]:
        """Copies of all records, in no particular order."""
        return [replace(record) for record in self._records.values()]

    def get(self, path: str) -> Optional[ChangeRecord]:
        record = self._records.get(path)
        return replace(record) if record is not None else None

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, path: object) -> bool:
        return path in self._records

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

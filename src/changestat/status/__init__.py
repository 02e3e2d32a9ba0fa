"""Change-aggregation engine: per-path records from two comparison passes."""

from .collector import ChangeCollector
from .models import ChangeRecord, Delta, DiffEvent, Phase
from .reporter import Reporter
from .source import DiffSource
from .store import ChangeRecordStore

__all__ = [
    "ChangeCollector",
    "ChangeRecord",
    "ChangeRecordStore",
    "Delta",
    "DiffEvent",
    "DiffSource",
    "Phase",
    "Reporter",
]

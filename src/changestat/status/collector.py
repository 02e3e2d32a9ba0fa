"""Drive the two comparison passes into a change-record store."""

from typing import Iterable, Optional, Sequence

from ..exceptions import IndexLoadError
from ..logging_config import get_logger
from .models import DiffEvent, Phase
from .source import DiffSource
from .store import ChangeRecordStore

logger = get_logger(__name__)


class ChangeCollector:
    """Run the working-copy pass, then the staged pass, against one store.

    Phase order is fixed: every event of the working-copy pass is written
    before the staged pass starts, and each upsert carries the phase that
    produced it.
    """

    def __init__(
        self,
        source: DiffSource,
        pathspec: Optional[Sequence[str]] = None,
        reference: str = "HEAD",
    ):
        self.source = source
        self.pathspec = list(pathspec) if pathspec else None
        self.reference = reference

    def run(self, store: ChangeRecordStore) -> bool:
        """Fill *store*; return False if the staged snapshot could not be loaded.

        A failed load abandons the whole collection before anything is
        written, and the caller carries on as if nothing changed.
        """
        try:
            self.source.load_index()
        except IndexLoadError as e:
            logger.debug("Abandoning collection: %s", e)
            return False

        self._collect(store, Phase.WORKTREE, self.source.diff_worktree(self.pathspec))

        baseline = self.source.resolve_reference(self.reference)
        logger.debug("Staged changes compared against %s", baseline)
        self._collect(store, Phase.INDEX, self.source.diff_index(baseline, self.pathspec))

        logger.debug("Collected %d path(s)", store.size())
        return True

    def _collect(
        self, store: ChangeRecordStore, phase: Phase, events: Iterable[DiffEvent]
    ) -> None:
        count = 0
        for event in events:
            store.upsert(event.path, phase, event.added, event.deleted)
            count += 1
        logger.debug("%s: %d event(s)", phase.value, count)

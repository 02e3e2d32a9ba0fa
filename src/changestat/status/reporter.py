"""Render a finished change-record store as the status table.

Layout::

                staged     unstaged path
      1:        +2/-0      nothing README.md
      2:    unchanged        +1/-1 src/app.py

Cells are plain Python strings, so very large counts widen a row rather
than being truncated; ``column_width`` is only the minimum width.
"""

from typing import BinaryIO, List, Optional

from rich.color import ColorSystem
from rich.style import Style

from ..logging_config import get_logger
from .models import ChangeRecord
from .store import ChangeRecordStore

logger = get_logger(__name__)

HEADER_INDENT = "      "

STAGED_LABEL = "staged"
UNSTAGED_LABEL = "unstaged"
PATH_LABEL = "path"

# Shown when a phase saw no difference for a path
WORKTREE_UNCHANGED = "nothing"
INDEX_UNCHANGED = "unchanged"


class Reporter:
    """Format a :class:`ChangeRecordStore` into the status report.

    ``header_style`` decorates the header labels only, and only when a
    ``color_system`` is given; the text of the report never depends on it.
    """

    def __init__(
        self,
        header_style: Optional[Style] = None,
        color_system: Optional[ColorSystem] = None,
        column_width: int = 12,
    ):
        self.header_style = header_style or Style.null()
        self.color_system = color_system
        self.column_width = column_width

    def render(self, store: ChangeRecordStore) -> str:
        if store.size() == 0:
            return "\n"

        records = sorted(store.snapshot(), key=lambda record: record.sort_key)
        logger.debug("Rendering %d record(s)", len(records))

        lines: List[str] = [HEADER_INDENT + self._header()]
        for number, record in enumerate(records, start=1):
            lines.append(f" {number:2d}: " + self._row(record))
        lines.append("")
        return "\n".join(lines) + "\n"

    def emit(self, store: ChangeRecordStore, stream: BinaryIO) -> None:
        """Write the rendered report to a binary stream, paths byte-for-byte."""
        stream.write(self.render(store).encode("utf-8", "surrogateescape"))
        stream.flush()

    def _header(self) -> str:
        text = self._columns(STAGED_LABEL, UNSTAGED_LABEL, PATH_LABEL)
        return self.header_style.render(text, color_system=self.color_system)

    def _row(self, record: ChangeRecord) -> str:
        return self._columns(
            record.index.describe(INDEX_UNCHANGED),
            record.worktree.describe(WORKTREE_UNCHANGED),
            record.path,
        )

    def _columns(self, staged: str, unstaged: str, path: str) -> str:
        width = self.column_width
        return f"{staged:>{width}} {unstaged:>{width}} {path}"

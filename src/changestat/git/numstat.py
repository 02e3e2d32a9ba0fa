"""Parse ``git diff --numstat -z`` output into diff events."""

from typing import Iterator

from ..logging_config import get_logger
from ..status.models import DiffEvent

logger = get_logger(__name__)

# Binary files report "-" for both counts
_BINARY_COUNT = b"-"


def decode_path(raw: bytes) -> str:
    """Decode a path as git wrote it; undecodable bytes survive as surrogates."""
    return raw.decode("utf-8", "surrogateescape")


def parse_numstat(raw: bytes) -> Iterator[DiffEvent]:
    """Yield one event per NUL-terminated ``added\\tdeleted\\tpath`` record.

    Rename records (``added\\tdeleted\\t\\0old\\0new``) are not expected since
    the diff runs with ``--no-renames``; if one shows up the new path is used.
    """
    fields = raw.split(b"\0")
    i = 0
    while i < len(fields):
        entry = fields[i]
        i += 1
        if not entry:
            continue

        parts = entry.split(b"\t", 2)
        if len(parts) != 3:
            logger.debug("Skipping malformed numstat record: %r", entry)
            continue

        added_raw, deleted_raw, path_raw = parts
        if not path_raw:
            # Rename form: the two following fields hold old and new path
            if i + 1 >= len(fields):
                logger.debug("Truncated numstat rename record: %r", entry)
                break
            path_raw = fields[i + 1]
            i += 2

        if added_raw == _BINARY_COUNT and deleted_raw == _BINARY_COUNT:
            yield DiffEvent(path=decode_path(path_raw), added=0, deleted=0, binary=True)
            continue

        try:
            added = int(added_raw)
            deleted = int(deleted_raw)
        except ValueError:
            logger.debug("Skipping numstat record with bad counts: %r", entry)
            continue

        yield DiffEvent(path=decode_path(path_raw), added=added, deleted=deleted)

"""Run git via subprocess: index loading, reference resolution, numstat diffs."""

import os
import subprocess
from dataclasses import replace
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Sequence

from ..exceptions import GitCommandError, IndexLoadError
from ..logging_config import get_logger
from ..status.models import DiffEvent
from ..status.source import DiffSource
from .numstat import parse_numstat

logger = get_logger(__name__)

# Object name of the tree with no entries; diffing against it shows every
# staged path as fully added.
EMPTY_TREE_SHA = "4b825dc642cb6eb9a060e54bf8d69288fbee4904"

# Keep the numstat output independent of user diff configuration
_DIFF_OPTIONS = [
    "--numstat",
    "-z",
    "--no-renames",
    "--no-ext-diff",
    "--no-textconv",
    "--no-color",
]


class GitRepository(DiffSource):
    """Thin wrapper over the git executable for one working copy."""

    def __init__(self, repo_path: str = ".", timeout: int = 30, git: str = "git"):
        self.repo_path = str(Path(repo_path).resolve())
        self.timeout = timeout
        self.git = git
        self._toplevel: Optional[Path] = None

    def load_index(self) -> int:
        """Make sure the staged snapshot can be read; return its entry count.

        Raises:
            IndexLoadError: not inside a working tree, or the index is unreadable.
        """
        try:
            inside = self._run(["rev-parse", "--is-inside-work-tree"])
        except GitCommandError as e:
            raise IndexLoadError(Path(self.repo_path), e.stderr.strip() or "not a git repository")
        if inside.strip() != b"true":
            raise IndexLoadError(Path(self.repo_path), "not inside a working tree")

        try:
            listing = self._run(["ls-files", "--stage", "-z"])
        except GitCommandError as e:
            raise IndexLoadError(Path(self.repo_path), e.stderr.strip() or "index unreadable")

        entries = listing.count(b"\0")
        logger.debug("Index loaded with %d entries", entries)
        return entries

    def resolve_reference(self, name: str = "HEAD") -> str:
        """Return *name* if it names a commit, else the empty-tree sentinel."""
        try:
            self._run(["rev-parse", "--verify", "--quiet", f"{name}^{{commit}}"])
        except GitCommandError:
            logger.debug("%s does not resolve, comparing against the empty tree", name)
            return EMPTY_TREE_SHA
        return name

    def diff_worktree(self, pathspec: Optional[Sequence[str]] = None) -> Iterator[DiffEvent]:
        """Changes between the working copy and the index.

        Binary files are sized in bytes: the working-copy file as added,
        the staged blob as deleted.
        """
        args = ["diff", *_DIFF_OPTIONS, *_pathspec_args(pathspec)]
        events = parse_numstat(self._run(args))
        return self._sized(events, self._worktree_size, lambda path: self._blob_size(f":{path}"))

    def diff_index(
        self, reference: str, pathspec: Optional[Sequence[str]] = None
    ) -> Iterator[DiffEvent]:
        """Changes between *reference* and the index.

        Binary files are sized in bytes: the staged blob as added, the blob
        in *reference* as deleted.
        """
        args = ["diff", "--cached", *_DIFF_OPTIONS, reference, *_pathspec_args(pathspec)]
        events = parse_numstat(self._run(args))
        return self._sized(
            events,
            lambda path: self._blob_size(f":{path}"),
            lambda path: self._blob_size(f"{reference}:{path}"),
        )

    def _sized(
        self,
        events: Iterable[DiffEvent],
        new_size: Callable[[str], int],
        old_size: Callable[[str], int],
    ) -> Iterator[DiffEvent]:
        for event in events:
            if event.binary:
                event = replace(event, added=new_size(event.path), deleted=old_size(event.path))
            yield event

    def _blob_size(self, spec: str) -> int:
        """Size in bytes of the object named by *spec*; 0 when it does not exist."""
        try:
            return int(self._run(["cat-file", "-s", spec]))
        except GitCommandError:
            return 0

    def _worktree_size(self, path: str) -> int:
        try:
            return (self._top_level() / path).stat().st_size
        except FileNotFoundError:
            return 0

    def _top_level(self) -> Path:
        # numstat paths are relative to the top of the working tree
        if self._toplevel is None:
            out = self._run(["rev-parse", "--show-toplevel"])
            self._toplevel = Path(os.fsdecode(out.rstrip(b"\n")))
        return self._toplevel

    def _run(self, args: List[str]) -> bytes:
        cmd = [self.git, "-C", self.repo_path, *args]
        logger.debug("Running %s", " ".join(cmd))
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                timeout=self.timeout,
            )
        except FileNotFoundError:
            raise GitCommandError(cmd, 127, f"{self.git} executable not found")
        except subprocess.TimeoutExpired:
            raise GitCommandError(cmd, -1, f"timed out after {self.timeout}s")

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", "replace")
            raise GitCommandError(cmd, result.returncode, stderr)
        return result.stdout


def _pathspec_args(pathspec: Optional[Sequence[str]]) -> List[str]:
    if not pathspec:
        return []
    return ["--", *pathspec]

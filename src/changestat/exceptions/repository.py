"""Repository exceptions: index loading and git subprocess failures."""

from pathlib import Path
from typing import Sequence

from .base import ChangestatError


class RepositoryError(ChangestatError):
    """Base class for errors talking to the repository."""
    pass


class IndexLoadError(RepositoryError):
    """Raised when the staged snapshot (the index) cannot be loaded."""

    def __init__(self, repo_path: Path, reason: str):
        super().__init__(
            f"Cannot load index: {repo_path}",
            details={"repo_path": str(repo_path), "reason": reason},
        )
        self.repo_path = repo_path
        self.reason = reason


class GitCommandError(RepositoryError):
    """Raised when a git command exits non-zero or cannot be started."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: str):
        command = " ".join(args)
        super().__init__(
            f"git command failed: {command}",
            details={"returncode": str(returncode), "stderr": stderr.strip()},
        )
        self.command = list(args)
        self.returncode = returncode
        self.stderr = stderr

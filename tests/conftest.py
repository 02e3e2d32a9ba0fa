"""Shared test fixtures for changestat tests."""

import shutil
import subprocess
from pathlib import Path

import pytest

from changestat.exceptions import IndexLoadError
from changestat.status import ChangeRecordStore, DiffEvent, DiffSource

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not found")


class FakeSource(DiffSource):
    """In-memory diff engine that records the calls made to it."""

    def __init__(self, worktree=(), index=(), reference="HEAD", load_error=None):
        self.worktree = [DiffEvent(*event) for event in worktree]
        self.index = [DiffEvent(*event) for event in index]
        self.reference = reference
        self.load_error = load_error
        self.calls = []

    def load_index(self):
        self.calls.append("load_index")
        if self.load_error is not None:
            raise IndexLoadError(Path("/repo"), self.load_error)
        return 0

    def resolve_reference(self, name="HEAD"):
        self.calls.append(("resolve_reference", name))
        return self.reference

    def diff_worktree(self, pathspec=None):
        self.calls.append(("diff_worktree", pathspec))
        return iter(self.worktree)

    def diff_index(self, reference, pathspec=None):
        self.calls.append(("diff_index", reference, pathspec))
        return iter(self.index)


@pytest.fixture
def store():
    """Empty change-record store."""
    return ChangeRecordStore()


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Keep user-level git and changestat configuration out of the tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("GIT_CONFIG_NOSYSTEM", "1")
    monkeypatch.setenv("GIT_CONFIG_GLOBAL", str(home / ".gitconfig"))
    monkeypatch.setenv("GIT_CEILING_DIRECTORIES", str(tmp_path))
    for name in ("CHANGESTAT_USE_COLOR", "CHANGESTAT_COLUMN_WIDTH",
                 "CHANGESTAT_GIT_TIMEOUT_SECONDS", "CHANGESTAT_VERBOSITY",
                 "FORCE_COLOR", "TTY_COMPATIBLE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def git(repo: Path, *args: str) -> str:
    result = subprocess.run(
        [
            "git",
            "-C", str(repo),
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            *args,
        ],
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


@pytest.fixture
def git_repo(isolated_env):
    """Fresh repository with no commits."""
    repo = isolated_env / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    return repo


@pytest.fixture
def committed_repo(git_repo):
    """Repository whose HEAD holds ``a.txt`` with two lines."""
    (git_repo / "a.txt").write_text("one\ntwo\n")
    git(git_repo, "add", "a.txt")
    git(git_repo, "commit", "-q", "-m", "initial")
    return git_repo

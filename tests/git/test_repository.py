"""Integration tests for git/repository.py against real repositories."""

import pytest

from changestat.exceptions import GitCommandError, IndexLoadError
from changestat.git import EMPTY_TREE_SHA, GitRepository
from changestat.status import ChangeCollector, ChangeRecordStore, Delta, DiffEvent, Reporter
from conftest import git, requires_git

pytestmark = requires_git

BLOB = b"\x00\x01\x02\x00binary"


@pytest.fixture
def binary_repo(committed_repo):
    """Repository whose HEAD also holds the binary file ``blob.bin``."""
    (committed_repo / "blob.bin").write_bytes(BLOB)
    git(committed_repo, "add", "blob.bin")
    git(committed_repo, "commit", "-q", "-m", "add blob")
    return committed_repo


class TestLoadIndex:
    def test_empty_repository(self, git_repo):
        assert GitRepository(str(git_repo)).load_index() == 0

    def test_counts_entries(self, committed_repo):
        assert GitRepository(str(committed_repo)).load_index() == 1

    def test_not_a_repository(self, isolated_env):
        plain = isolated_env / "plain"
        plain.mkdir()
        with pytest.raises(IndexLoadError):
            GitRepository(str(plain)).load_index()

    def test_corrupt_index(self, committed_repo):
        (committed_repo / ".git" / "index").write_bytes(b"not an index at all")
        with pytest.raises(IndexLoadError):
            GitRepository(str(committed_repo)).load_index()


class TestResolveReference:
    def test_unborn_head_falls_back_to_empty_tree(self, git_repo):
        assert GitRepository(str(git_repo)).resolve_reference() == EMPTY_TREE_SHA

    def test_head_resolves(self, committed_repo):
        assert GitRepository(str(committed_repo)).resolve_reference() == "HEAD"

    def test_unknown_name(self, committed_repo):
        repo = GitRepository(str(committed_repo))
        assert repo.resolve_reference("no-such-branch") == EMPTY_TREE_SHA


class TestDiffs:
    def test_staged_against_empty_tree(self, git_repo):
        (git_repo / "a.txt").write_text("one\ntwo\n")
        git(git_repo, "add", "a.txt")

        events = list(GitRepository(str(git_repo)).diff_index(EMPTY_TREE_SHA))
        assert events == [DiffEvent("a.txt", 2, 0)]

    def test_worktree_modification(self, committed_repo):
        (committed_repo / "a.txt").write_text("one\nTWO\nthree\n")

        repo = GitRepository(str(committed_repo))
        assert list(repo.diff_worktree()) == [DiffEvent("a.txt", 2, 1)]
        assert list(repo.diff_index("HEAD")) == []

    def test_worktree_deletion(self, committed_repo):
        (committed_repo / "a.txt").unlink()
        events = list(GitRepository(str(committed_repo)).diff_worktree())
        assert events == [DiffEvent("a.txt", 0, 2)]

    def test_pathspec_limits_output(self, committed_repo):
        (committed_repo / "a.txt").write_text("changed\n")
        (committed_repo / "b.txt").write_text("new\n")
        git(committed_repo, "add", "b.txt")

        repo = GitRepository(str(committed_repo))
        assert list(repo.diff_worktree(["b.txt"])) == []
        assert [e.path for e in repo.diff_index("HEAD", ["b.txt"])] == ["b.txt"]
        assert list(repo.diff_index("HEAD", ["a.txt"])) == []

    def test_rename_reported_as_delete_and_add(self, committed_repo):
        git(committed_repo, "mv", "a.txt", "moved.txt")
        events = list(GitRepository(str(committed_repo)).diff_index("HEAD"))
        assert sorted(events, key=lambda e: e.path) == [
            DiffEvent("a.txt", 0, 2),
            DiffEvent("moved.txt", 2, 0),
        ]

    def test_bad_reference_raises(self, committed_repo):
        with pytest.raises(GitCommandError):
            GitRepository(str(committed_repo)).diff_index("no-such-ref")

    def test_missing_git_executable(self, committed_repo):
        repo = GitRepository(str(committed_repo), git="definitely-not-git-xyz")
        with pytest.raises(GitCommandError) as excinfo:
            list(repo.diff_worktree())
        assert excinfo.value.returncode == 127


class TestBinarySizes:
    """Binary changes are counted in bytes instead of lines."""

    def test_staged_binary(self, committed_repo):
        (committed_repo / "blob.bin").write_bytes(BLOB)
        git(committed_repo, "add", "blob.bin")

        events = list(GitRepository(str(committed_repo)).diff_index("HEAD"))
        assert events == [DiffEvent("blob.bin", len(BLOB), 0, binary=True)]

    def test_staged_binary_against_empty_tree(self, git_repo):
        (git_repo / "blob.bin").write_bytes(BLOB)
        git(git_repo, "add", "blob.bin")

        events = list(GitRepository(str(git_repo)).diff_index(EMPTY_TREE_SHA))
        assert events == [DiffEvent("blob.bin", len(BLOB), 0, binary=True)]

    def test_modified_in_worktree(self, binary_repo):
        (binary_repo / "blob.bin").write_bytes(b"\x00ab")

        repo = GitRepository(str(binary_repo))
        assert list(repo.diff_worktree()) == [DiffEvent("blob.bin", 3, len(BLOB), binary=True)]
        assert list(repo.diff_index("HEAD")) == []

    def test_staged_then_modified_again(self, binary_repo):
        (binary_repo / "blob.bin").write_bytes(b"\x00ab")
        git(binary_repo, "add", "blob.bin")
        (binary_repo / "blob.bin").write_bytes(b"\x00abcd")

        repo = GitRepository(str(binary_repo))
        assert list(repo.diff_index("HEAD")) == [DiffEvent("blob.bin", 3, len(BLOB), binary=True)]
        assert list(repo.diff_worktree()) == [DiffEvent("blob.bin", 5, 3, binary=True)]

    def test_deleted_from_worktree(self, binary_repo):
        (binary_repo / "blob.bin").unlink()
        events = list(GitRepository(str(binary_repo)).diff_worktree())
        assert events == [DiffEvent("blob.bin", 0, len(BLOB), binary=True)]

    def test_sizes_resolve_from_top_level(self, binary_repo):
        """Paths are relative to the top of the tree even when run from a subdirectory."""
        (binary_repo / "sub").mkdir()
        (binary_repo / "blob.bin").write_bytes(b"\x00ab")

        events = list(GitRepository(str(binary_repo / "sub")).diff_worktree())
        assert events == [DiffEvent("blob.bin", 3, len(BLOB), binary=True)]


class TestEndToEnd:
    def test_collect_and_render(self, committed_repo):
        (committed_repo / "a.txt").write_text("one\nTWO\nthree\n")
        (committed_repo / "b.txt").write_text("x\n")
        git(committed_repo, "add", "b.txt")

        store = ChangeRecordStore()
        assert ChangeCollector(GitRepository(str(committed_repo))).run(store)

        assert store.get("a.txt").worktree == Delta(2, 1)
        assert store.get("a.txt").index.is_zero
        assert store.get("b.txt").index == Delta(1, 0)
        assert store.get("b.txt").worktree.is_zero

        lines = Reporter().render(store).splitlines()
        assert lines[1] == "  1: " + "%12s %12s %s" % ("unchanged", "+2/-1", "a.txt")
        assert lines[2] == "  2: " + "%12s %12s %s" % ("+1/-0", "nothing", "b.txt")

    def test_staged_then_modified_again(self, committed_repo):
        """The same path carries a staged and an unstaged delta."""
        (committed_repo / "a.txt").write_text("one\ntwo\nthree\n")
        git(committed_repo, "add", "a.txt")
        (committed_repo / "a.txt").write_text("one\ntwo\nthree\nfour\nfive\n")

        store = ChangeRecordStore()
        ChangeCollector(GitRepository(str(committed_repo))).run(store)

        record = store.get("a.txt")
        assert record.index == Delta(1, 0)
        assert record.worktree == Delta(2, 0)

    def test_clean_repository_renders_blank_line(self, committed_repo):
        store = ChangeRecordStore()
        ChangeCollector(GitRepository(str(committed_repo))).run(store)
        assert Reporter().render(store) == "\n"

    def test_unreadable_index_collects_nothing(self, committed_repo):
        (committed_repo / "a.txt").write_text("changed\n")
        (committed_repo / ".git" / "index").write_bytes(b"junk")

        store = ChangeRecordStore()
        assert ChangeCollector(GitRepository(str(committed_repo))).run(store) is False
        assert store.size() == 0

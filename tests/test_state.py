"""Tests for RepoStateCache memoization and error propagation."""

from __future__ import annotations

import pytest

from starship_jj.diffstat import DiffStats
from starship_jj.exceptions import EngineError
from starship_jj.state import RepoStateCache, SlotState

from memory_engine import MemoryEngine, MemoryRepository


class TestMemoization:
    """Each accessor asks the engine at most once."""

    def test_slots_start_pending(self, cache: RepoStateCache):
        for name in RepoStateCache.SLOTS:
            assert cache.slot_state(name) is SlotState.PENDING

    def test_working_copy_commit_loaded_once(self, cache: RepoStateCache, repo: MemoryRepository):
        first = cache.working_copy_commit()
        second = cache.working_copy_commit()
        assert first is second
        assert first.commit_id == "c3"
        assert repo.calls["load_workspace"] == 1
        assert repo.calls["repo"] == 1
        assert repo.calls["working_copy_commit_id"] == 1
        assert repo.calls["get_commit"] == 1

    def test_dependencies_pulled_on_demand(self, cache: RepoStateCache):
        cache.tree()
        assert cache.slot_state("commit") is SlotState.PRESENT
        assert cache.slot_state("tree") is SlotState.PRESENT
        assert cache.slot_state("parent_tree") is SlotState.PENDING
        assert cache.slot_state("parent_commits") is SlotState.PENDING

    def test_parent_commits(self, cache: RepoStateCache):
        parents = cache.parent_commits()
        assert [p.commit_id for p in parents] == ["b2"]
        assert cache.parent_commits() is parents

    def test_snapshot_flag_forwarded(self, repo: MemoryRepository):
        engine = MemoryEngine(repo)
        RepoStateCache(engine, snapshot=False).workspace()
        assert engine.snapshots == [False]


class TestAbsentFacts:
    """A missing working copy is ABSENT, not an error."""

    @pytest.fixture
    def cache(self) -> RepoStateCache:
        r = MemoryRepository()
        r.add_commit("a1", description="init")
        return RepoStateCache(MemoryEngine(r))

    def test_absent_working_copy(self, cache: RepoStateCache):
        assert cache.working_copy_commit_id() is None
        assert cache.slot_state("commit_id") is SlotState.ABSENT
        assert cache.working_copy_commit() is None
        assert cache.slot_state("commit") is SlotState.ABSENT

    def test_absent_propagates(self, cache: RepoStateCache):
        assert cache.tree() is None
        assert cache.parent_tree() is None
        assert cache.parent_commits() == []
        assert cache.diff_stats() is None
        assert cache.commit_is_empty() is None

    def test_absent_not_recomputed(self, cache: RepoStateCache):
        cache.working_copy_commit_id()
        cache.working_copy_commit_id()
        repo = cache.repository()
        assert repo.calls["working_copy_commit_id"] == 1


class TestEngineErrors:
    """Engine errors propagate and leave the slot pending."""

    def test_error_propagates(self, cache: RepoStateCache, repo: MemoryRepository):
        repo.fail_on.add("get_commit")
        with pytest.raises(EngineError, match="get_commit"):
            cache.working_copy_commit()
        assert cache.slot_state("commit") is SlotState.PENDING
        assert cache.slot_state("commit_id") is SlotState.PRESENT

    def test_retry_after_error(self, cache: RepoStateCache, repo: MemoryRepository):
        repo.fail_on.add("get_commit")
        with pytest.raises(EngineError):
            cache.working_copy_commit()
        repo.fail_on.clear()
        assert cache.working_copy_commit().commit_id == "c3"


class TestDerivedFacts:
    """diff_stats and commit_is_empty."""

    def test_diff_stats(self, cache: RepoStateCache):
        assert cache.diff_stats() == DiffStats(files_changed=2, lines_added=3, lines_removed=1)

    def test_not_empty(self, cache: RepoStateCache):
        assert cache.commit_is_empty() is False

    def test_empty_commit(self, repo: MemoryRepository):
        repo.add_commit("d4", parents=["c3"])
        repo.set_working_copy("d4")
        cache = RepoStateCache(MemoryEngine(repo))
        assert cache.commit_is_empty() is True
        assert cache.diff_stats().is_empty()

    def test_rename_counts_one_file(self, repo: MemoryRepository):
        repo.add_commit(
            "d4",
            parents=["c3"],
            files={"README.md": "hello\n", "main.py": "x = 2\n", "notes.txt": "a\nb\n"},
            copies={"main.py": "src.py"},
        )
        repo.set_working_copy("d4")
        cache = RepoStateCache(MemoryEngine(repo))
        assert cache.diff_stats() == DiffStats(files_changed=1, lines_added=0, lines_removed=0)

    def test_root_commit_diffs_against_empty_tree(self):
        r = MemoryRepository()
        r.add_commit("a1", files={"README.md": "one\ntwo\n"})
        r.set_working_copy("a1")
        cache = RepoStateCache(MemoryEngine(r))
        assert cache.diff_stats() == DiffStats(files_changed=1, lines_added=2, lines_removed=0)

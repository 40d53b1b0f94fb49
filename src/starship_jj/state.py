"""Lazy, memoized repository facts for one prompt invocation.

Each fact lives in a slot that is either still PENDING, loaded as ABSENT
(e.g. the workspace has no working-copy commit) or loaded as PRESENT.  An
accessor computes its slot at most once and pulls its dependencies through
their own accessors, so only the facts the configured modules ask for are
ever computed.  Engine errors propagate unchanged and leave the slot PENDING.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Callable, Generic, TypeVar

from starship_jj.diffstat import DiffStats, summarize

if TYPE_CHECKING:
    from starship_jj.engine.protocols import Commit, CopyRecord, Engine, Repository, Tree, Workspace

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SlotState(str, enum.Enum):
    PENDING = "pending"
    ABSENT = "absent"
    PRESENT = "present"


class Slot(Generic[T]):
    """One memoized fact: not yet computed, computed-absent or computed-present."""

    __slots__ = ("state", "value")

    def __init__(self) -> None:
        self.state = SlotState.PENDING
        self.value: T | None = None

    @property
    def loaded(self) -> bool:
        return self.state is not SlotState.PENDING

    def set(self, value: T | None) -> None:
        self.value = value
        self.state = SlotState.ABSENT if value is None else SlotState.PRESENT


class RepoStateCache:
    """Per-invocation cache over engine facts.

    Dependency order: workspace -> repository -> working-copy commit id ->
    working-copy commit -> {parent commits, tree, parent tree}.

    The cache owns the engine handles it creates; commits and trees it hands
    out are only borrowed by callers.
    """

    SLOTS = (
        "workspace",
        "repository",
        "commit_id",
        "commit",
        "parent_commits",
        "tree",
        "parent_tree",
    )

    def __init__(self, engine: Engine, *, snapshot: bool = True) -> None:
        self._engine = engine
        self._snapshot = snapshot
        self._slots: dict[str, Slot] = {name: Slot() for name in self.SLOTS}

    def slot_state(self, name: str) -> SlotState:
        return self._slots[name].state

    def _load(self, name: str, compute: Callable[[], T | None]) -> T | None:
        slot = self._slots[name]
        if not slot.loaded:
            logger.debug("Computing %s", name)
            slot.set(compute())
            logger.debug("Computed %s: %s", name, slot.state.value)
        return slot.value

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def workspace(self) -> Workspace:
        return self._load("workspace", lambda: self._engine.load_workspace(snapshot=self._snapshot))

    def repository(self) -> Repository:
        return self._load("repository", lambda: self.workspace().repo())

    def working_copy_commit_id(self) -> str | None:
        return self._load(
            "commit_id",
            lambda: self.repository().working_copy_commit_id(self.workspace().name),
        )

    def working_copy_commit(self) -> Commit | None:
        def compute() -> Commit | None:
            commit_id = self.working_copy_commit_id()
            if commit_id is None:
                return None
            return self.repository().get_commit(commit_id)

        return self._load("commit", compute)

    def parent_commits(self) -> list[Commit]:
        """Parents of the working-copy commit; empty when there is none."""

        def compute() -> list[Commit]:
            commit = self.working_copy_commit()
            if commit is None:
                return []
            repo = self.repository()
            return [repo.get_commit(parent_id) for parent_id in commit.parent_ids]

        return self._load("parent_commits", compute)

    def tree(self) -> Tree | None:
        def compute() -> Tree | None:
            commit = self.working_copy_commit()
            return None if commit is None else self.repository().tree(commit)

        return self._load("tree", compute)

    def parent_tree(self) -> Tree | None:
        def compute() -> Tree | None:
            commit = self.working_copy_commit()
            return None if commit is None else self.repository().parent_tree(commit)

        return self._load("parent_tree", compute)

    # ------------------------------------------------------------------
    # Derived facts
    # ------------------------------------------------------------------

    def diff_stats(self) -> DiffStats | None:
        """Copy-aware change counters of the working-copy commit.

        Returns None when there is no working-copy commit to diff.
        """
        tree = self.tree()
        parent_tree = self.parent_tree()
        commit = self.working_copy_commit()
        if tree is None or parent_tree is None or commit is None:
            return None

        repo = self.repository()
        records: list[CopyRecord] = []
        for parent_id in commit.parent_ids:
            records.extend(repo.copy_records(parent_id, commit.commit_id))
        return summarize(repo.diff_stream(parent_tree, tree, records))

    def commit_is_empty(self) -> bool | None:
        """Whether the working-copy commit changes nothing; None if unknown."""
        tree = self.tree()
        parent_tree = self.parent_tree()
        if tree is None or parent_tree is None:
            return None
        return tree == parent_tree

"""Abstract engine interfaces consumed by starship-jj.

The version-control engine is external.  This module defines the values it
hands out and the ABC contracts an adapter must satisfy.  No subprocess or
storage code here; the concrete adapter lives in jj_cli.py.

Every method may raise :class:`~starship_jj.exceptions.EngineError`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Literal, Sequence

if TYPE_CHECKING:
    from collections.abc import Iterator

IdKind = Literal["commit", "change"]


@dataclass(frozen=True)
class Commit:
    """A commit as reported by the engine.

    Attributes:
        commit_id: Hex commit identifier.
        change_id: Change identifier (stable across rewrites).
        description: Full commit description, possibly empty.
        parent_ids: Parent commit ids, first parent first.
        timestamp: Committer timestamp in seconds since the epoch.
        conflict: Whether the commit's tree has unresolved conflicts.
        divergent: Whether the change id resolves to several visible commits.
        hidden: Whether the commit is no longer visible in the repo view.
        immutable: Whether the commit belongs to the immutable set.
    """

    commit_id: str
    change_id: str
    description: str = ""
    parent_ids: tuple[str, ...] = ()
    timestamp: int = 0
    conflict: bool = False
    divergent: bool = False
    hidden: bool = False
    immutable: bool = False


@dataclass(frozen=True)
class Tree:
    """Opaque tree handle.  Equality is structural on ``tree_id`` only."""

    tree_id: str
    revision: str | None = field(default=None, compare=False)


@dataclass(frozen=True)
class RemoteBookmark:
    """A remote-tracking bookmark and the commits it points at."""

    name: str
    remote: str
    targets: tuple[str, ...] = ()

    @property
    def display_name(self) -> str:
        return f"{self.name}@{self.remote}"


@dataclass(frozen=True)
class CopyRecord:
    """A copy or rename detected between a parent and a commit."""

    source: str
    target: str


@dataclass(frozen=True)
class FileDiff:
    """One per-path entry of a tree diff.

    ``source_path`` is set when the engine matched the path to a copy or
    rename source; binary files report zero lines.
    """

    path: str
    lines_added: int = 0
    lines_removed: int = 0
    source_path: str | None = None


class Repository(ABC):
    """Read-only view of a repository at one operation."""

    @abstractmethod
    def working_copy_commit_id(self, workspace_name: str) -> str | None:
        """Return the working-copy commit id of a workspace, or None."""
        ...

    @abstractmethod
    def resolve(self, revset: str) -> list[str]:
        """Evaluate a revset to commit ids, newest first."""
        ...

    @abstractmethod
    def get_commit(self, commit_id: str) -> Commit:
        """Fetch a commit by id."""
        ...

    @abstractmethod
    def tree(self, commit: Commit) -> Tree:
        """Return the tree of a commit."""
        ...

    @abstractmethod
    def parent_tree(self, commit: Commit) -> Tree:
        """Return the (merged) tree of a commit's parents."""
        ...

    @abstractmethod
    def local_bookmarks_for_commit(self, commit_id: str) -> list[str]:
        """List local bookmark names pointing at a commit."""
        ...

    @abstractmethod
    def all_remote_bookmarks(self) -> Sequence[RemoteBookmark]:
        """List every remote bookmark with its target commits."""
        ...

    @abstractmethod
    def copy_records(self, parent_id: str, commit_id: str) -> list[CopyRecord]:
        """Return copies/renames recorded between a parent and a commit."""
        ...

    @abstractmethod
    def diff_stream(
        self, parent_tree: Tree, tree: Tree, copy_records: Sequence[CopyRecord]
    ) -> Iterator[FileDiff]:
        """Diff two trees with copy detection, one entry per changed path."""
        ...

    @abstractmethod
    def shortest_unique_prefix_len(self, object_id: str, kind: IdKind) -> int:
        """Length of the shortest prefix that still uniquely identifies an id."""
        ...


class Workspace(ABC):
    """A working copy bound to a repository."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Workspace name (``default`` for the initial workspace)."""
        ...

    @property
    @abstractmethod
    def root(self) -> Path:
        """Root directory of the working copy."""
        ...

    @abstractmethod
    def repo(self) -> Repository:
        """Load the repository at its current operation."""
        ...


class Engine(ABC):
    """Entry point of a version-control engine adapter."""

    @abstractmethod
    def load_workspace(self, *, snapshot: bool) -> Workspace:
        """Locate and load the workspace.

        Args:
            snapshot: Snapshot the working copy first.  When False the working
                copy is left untouched (``--ignore-working-copy``).
        """
        ...

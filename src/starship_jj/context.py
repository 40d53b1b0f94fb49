"""Per-invocation facts shared between module ``parse`` and ``render``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from starship_jj.bookmarks import IgnoreEmpty
    from starship_jj.config.models import GlobalConfig
    from starship_jj.diffstat import DiffStats
    from starship_jj.state import RepoStateCache


@dataclass
class BookmarkData:
    # Distances per ignore-empty mode; a mode is absent until parsed.
    by_mode: dict[IgnoreEmpty, dict[str, int]] = field(default_factory=dict)


@dataclass
class CommitWarnings:
    conflict: bool | None = None
    divergent: bool | None = None
    hidden: bool | None = None
    immutable: bool | None = None
    empty: bool | None = None


@dataclass(frozen=True)
class ShortId:
    """An abbreviated id split at its shortest unique prefix."""

    prefix: str
    rest: str


@dataclass
class CommitData:
    desc: str | None = None
    ahead: bool = False  # desc belongs to the parent
    warnings: CommitWarnings = field(default_factory=CommitWarnings)
    diff: DiffStats | None = None
    diff_parsed: bool = False
    change_id: ShortId | None = None
    commit_id: ShortId | None = None


@dataclass
class PromptData:
    bookmarks: BookmarkData = field(default_factory=BookmarkData)
    commit: CommitData = field(default_factory=CommitData)


@dataclass
class PromptContext:
    """What a module's ``parse`` step may read and populate."""

    cache: RepoStateCache
    config: GlobalConfig
    data: PromptData = field(default_factory=PromptData)

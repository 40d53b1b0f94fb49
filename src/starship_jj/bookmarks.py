"""Nearest-bookmark resolution.

Finds the bookmarks closest to the working-copy commit and how many commits
back they are:

1. Bookmarks on the working-copy commit itself have distance 0; if there are
   any, the search stops.
2. Otherwise the engine is asked for the heads of bookmark-bearing ancestors of
   ``@-`` within the search depth, and the most recent head is picked by
   ``(committer timestamp, commit id)``, greatest first.
3. The distance is ``len(<head>::@) - 1`` so that a direct parent is 1.

Remote bookmarks are shown as ``name@remote`` and only when no local bookmark
with the same bare name was collected.
"""

from __future__ import annotations

import enum
import fnmatch
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from starship_jj.engine.protocols import Commit
    from starship_jj.state import RepoStateCache

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_DEPTH = 100


class IgnoreEmpty(str, enum.Enum):
    """Which description-less commits are left out of the distance."""

    NONE = "None"
    CURRENT = "Current"
    ALL = "All"


@dataclass(frozen=True, order=True)
class Bookmark:
    """A bookmark display name and its distance from the working copy."""

    distance: int
    name: str


def bookmark_heads_revset(search_depth: int) -> str:
    return f"heads(ancestors(@-, {search_depth}) & (bookmarks() | remote_bookmarks()))"


def range_to_working_copy_revset(commit_id: str) -> str:
    return f"{commit_id}::@"


def ordered_bookmarks(bookmarks: dict[str, int]) -> list[Bookmark]:
    """Order by distance, then by name; each name appears once."""
    return sorted(Bookmark(distance, name) for name, distance in bookmarks.items())


class BookmarkResolver:
    """Resolve bookmarks near the working-copy commit.

    Args:
        cache: Fact cache for this invocation.
        search_depth: How many generations back from ``@-`` to search.
        exclude: Glob patterns; matching display names are skipped.
        ignore_empty: Commits without description not counted in distances.
    """

    def __init__(
        self,
        cache: RepoStateCache,
        *,
        search_depth: int = DEFAULT_SEARCH_DEPTH,
        exclude: Sequence[str] = (),
        ignore_empty: IgnoreEmpty = IgnoreEmpty.NONE,
    ) -> None:
        self._cache = cache
        self._search_depth = search_depth
        self._exclude = tuple(exclude)
        self._ignore_empty = ignore_empty

    def is_excluded(self, name: str) -> bool:
        return any(fnmatch.fnmatchcase(name, pattern) for pattern in self._exclude)

    def resolve(self) -> dict[str, int]:
        """Return ``{display name: distance}``; empty when nothing is near."""
        bookmarks: dict[str, int] = {}
        wc = self._cache.working_copy_commit()
        if wc is None:
            return bookmarks

        if self.collect(wc.commit_id, 0, bookmarks):
            logger.debug("Bookmarks on the working copy: %s", sorted(bookmarks))
            return bookmarks
        if not wc.parent_ids:
            return bookmarks

        repo = self._cache.repository()
        head_ids = repo.resolve(bookmark_heads_revset(self._search_depth))
        if not head_ids:
            logger.debug("No bookmarked ancestor within %d generations", self._search_depth)
            return bookmarks

        target = self._most_recent([repo.get_commit(commit_id) for commit_id in head_ids])
        distance = self.distance(target.commit_id)
        logger.debug("Nearest bookmarked ancestor %s at distance %d", target.commit_id[:12], distance)
        self.collect(target.commit_id, distance, bookmarks)
        return bookmarks

    @staticmethod
    def _most_recent(commits: list[Commit]) -> Commit:
        return max(commits, key=lambda c: (c.timestamp, c.commit_id))

    def distance(self, commit_id: str) -> int:
        """Ancestry steps from ``commit_id`` to the working copy."""
        repo = self._cache.repository()
        range_ids = repo.resolve(range_to_working_copy_revset(commit_id))
        if self._ignore_empty is IgnoreEmpty.NONE:
            return max(len(range_ids) - 1, 0)

        wc_id = self._cache.working_copy_commit_id()
        distance = 0
        for range_id in range_ids:
            if range_id == commit_id:
                continue
            if range_id == wc_id:
                commit = self._cache.working_copy_commit()
            elif self._ignore_empty is IgnoreEmpty.ALL:
                commit = repo.get_commit(range_id)
            else:
                distance += 1
                continue
            if commit is not None and commit.description:
                distance += 1
        return distance

    def collect(self, commit_id: str, distance: int, bookmarks: dict[str, int]) -> bool:
        """Add the bookmarks on ``commit_id`` to ``bookmarks``.

        Returns True if any bookmark was added.
        """
        repo = self._cache.repository()
        found = False

        for name in repo.local_bookmarks_for_commit(commit_id):
            if not self.is_excluded(name):
                bookmarks[name] = distance
                found = True

        local_names = set(bookmarks)
        for remote_bookmark in repo.all_remote_bookmarks():
            if commit_id not in remote_bookmark.targets or remote_bookmark.name in local_names:
                continue
            name = remote_bookmark.display_name
            if not self.is_excluded(name):
                bookmarks[name] = distance
                found = True

        return found

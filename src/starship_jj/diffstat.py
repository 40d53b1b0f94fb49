"""Change counters derived from an engine tree diff."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from starship_jj.engine.protocols import FileDiff

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiffStats:
    """Files changed, lines added and lines removed by a commit.

    A copied or renamed path counts as one changed file even when its content
    is unchanged.
    """

    files_changed: int = 0
    lines_added: int = 0
    lines_removed: int = 0

    def is_empty(self) -> bool:
        return self.files_changed == 0 and self.lines_added == 0 and self.lines_removed == 0


def summarize(entries: Iterable[FileDiff]) -> DiffStats:
    """Reduce a per-path diff stream to three counters.

    Paths reported twice (e.g. once per side of a conflicted merge) count once.
    """
    paths: set[str] = set()
    added = removed = 0
    for entry in entries:
        paths.add(entry.path)
        added += entry.lines_added
        removed += entry.lines_removed
    stats = DiffStats(files_changed=len(paths), lines_added=added, lines_removed=removed)
    logger.debug("Diff summary: %s", stats)
    return stats

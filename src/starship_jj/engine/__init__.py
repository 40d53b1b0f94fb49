"""Version-control engine interfaces and adapters.

Provides the abstract contracts consumed by starship-jj plus the adapter for
the ``jj`` CLI.
"""

from starship_jj.engine.jj_cli import JjCliEngine, JjCliRepository, JjRunner, parse_git_diff
from starship_jj.engine.protocols import (
    Commit,
    CopyRecord,
    Engine,
    FileDiff,
    RemoteBookmark,
    Repository,
    Tree,
    Workspace,
)

__all__ = [
    "Engine",
    "Workspace",
    "Repository",
    "Commit",
    "Tree",
    "RemoteBookmark",
    "CopyRecord",
    "FileDiff",
    "JjCliEngine",
    "JjCliRepository",
    "JjRunner",
    "parse_git_diff",
]

"""Engine adapter that drives the ``jj`` executable.

Every query is one ``jj`` invocation with a machine-readable template; revset
evaluation, diffing and copy detection stay inside jj.  A non-zero exit is
raised as :class:`EngineError` carrying jj's stderr.

The jj CLI does not expose tree ids, so trees are keyed on the revision whose
content they hold: a commit that jj reports as ``empty`` shares its key with
its parent tree.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import TYPE_CHECKING, Sequence

from starship_jj.engine.protocols import (
    Commit,
    CopyRecord,
    Engine,
    FileDiff,
    IdKind,
    RemoteBookmark,
    Repository,
    Tree,
    Workspace,
)
from starship_jj.exceptions import EngineError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

_FIELD = "\0"

_COMMIT_TEMPLATE = ' ++ "\\0" ++ '.join(
    [
        "commit_id",
        "change_id",
        'parents.map(|c| c.commit_id()).join(",")',
        'committer.timestamp().format("%s")',
        'if(conflict, "1", "0")',
        'if(divergent, "1", "0")',
        'if(hidden, "1", "0")',
        'if(immutable, "1", "0")',
        'if(empty, "1", "0")',
        "description",
    ]
)

_BOOKMARK_TEMPLATE = (
    'name ++ "\\0" ++ if(remote, remote, "") ++ "\\0" ++ '
    'added_targets.map(|c| c.commit_id()).join(",") ++ "\\n"'
)

# jj lists the backing git repo's refs as the pseudo-remote "git".
_GIT_PSEUDO_REMOTE = "git"


class JjRunner:
    """Thin wrapper around jj invocations."""

    def __init__(
        self,
        *,
        executable: str = "jj",
        cwd: Path | None = None,
        ignore_working_copy: bool = False,
    ) -> None:
        self.executable = executable
        self.cwd = cwd or Path.cwd()
        self.ignore_working_copy = ignore_working_copy

    def run(self, args: Sequence[str]) -> str:
        """Run a jj command and return stdout; raise EngineError on failure."""
        command = [self.executable, "--no-pager", "--color=never"]
        if self.ignore_working_copy:
            command.append("--ignore-working-copy")
        command.extend(args)
        logger.debug("Running %s", " ".join(command))
        try:
            result = subprocess.run(
                command,
                cwd=str(self.cwd),
                check=False,
                text=True,
                capture_output=True,
            )
        except OSError as exc:
            raise EngineError(f"Failed to run {self.executable}: {exc}", command=command) from exc
        if result.returncode != 0:
            stderr = result.stderr.strip() or result.stdout.strip()
            raise EngineError(f"jj {' '.join(args)} failed in {self.cwd}: {stderr}", command=command)
        return result.stdout

    def log(self, revset: str, template: str) -> str:
        return self.run(["log", "--no-graph", "-r", revset, "-T", template])


class JjCliRepository(Repository):
    """Repository answered by the jj CLI."""

    def __init__(self, runner: JjRunner) -> None:
        self._runner = runner
        self._empty: dict[str, bool] = {}
        self._change_to_commit: dict[str, str] = {}
        self._bookmark_rows: list[tuple[str, str, tuple[str, ...]]] | None = None

    def working_copy_commit_id(self, workspace_name: str) -> str | None:
        # jj resolves @ for the workspace the runner is pointed at.
        ids = self.resolve("present(@)")
        return ids[0] if ids else None

    def resolve(self, revset: str) -> list[str]:
        output = self._runner.log(revset, 'commit_id ++ "\\n"')
        return [line for line in output.splitlines() if line]

    def get_commit(self, commit_id: str) -> Commit:
        output = self._runner.log(commit_id, _COMMIT_TEMPLATE)
        fields = output.split(_FIELD, 9)
        if len(fields) != 10:
            raise EngineError(f"Unexpected commit template output for {commit_id}: {output!r}")
        (cid, change_id, parents, timestamp, conflict, divergent, hidden, immutable, empty, description) = fields
        self._empty[cid] = empty == "1"
        self._change_to_commit[change_id] = cid
        return Commit(
            commit_id=cid,
            change_id=change_id,
            description=description,
            parent_ids=tuple(p for p in parents.split(",") if p),
            timestamp=int(timestamp or 0),
            conflict=conflict == "1",
            divergent=divergent == "1",
            hidden=hidden == "1",
            immutable=immutable == "1",
        )

    def tree(self, commit: Commit) -> Tree:
        if commit.commit_id not in self._empty:
            self.get_commit(commit.commit_id)
        if self._empty[commit.commit_id]:
            return Tree(f"parents:{commit.commit_id}", revision=commit.commit_id)
        return Tree(f"tree:{commit.commit_id}", revision=commit.commit_id)

    def parent_tree(self, commit: Commit) -> Tree:
        # Merge parents have no single revision; the diff falls back to `-r`.
        revision = commit.parent_ids[0] if len(commit.parent_ids) == 1 else None
        return Tree(f"parents:{commit.commit_id}", revision=revision)

    def _bookmarks(self) -> list[tuple[str, str, tuple[str, ...]]]:
        if self._bookmark_rows is None:
            output = self._runner.run(["bookmark", "list", "--all-remotes", "-T", _BOOKMARK_TEMPLATE])
            rows = []
            for line in output.splitlines():
                if not line:
                    continue
                name, remote, targets = line.split(_FIELD, 2)
                rows.append((name, remote, tuple(t for t in targets.split(",") if t)))
            self._bookmark_rows = rows
        return self._bookmark_rows

    def local_bookmarks_for_commit(self, commit_id: str) -> list[str]:
        return [name for name, remote, targets in self._bookmarks() if not remote and commit_id in targets]

    def all_remote_bookmarks(self) -> list[RemoteBookmark]:
        return [
            RemoteBookmark(name=name, remote=remote, targets=targets)
            for name, remote, targets in self._bookmarks()
            if remote and remote != _GIT_PSEUDO_REMOTE
        ]

    def copy_records(self, parent_id: str, commit_id: str) -> list[CopyRecord]:
        # `jj diff --git` runs copy detection itself.
        return []

    def diff_stream(
        self, parent_tree: Tree, tree: Tree, copy_records: Sequence[CopyRecord]
    ) -> Iterator[FileDiff]:
        if parent_tree.revision is not None:
            args = ["diff", "--git", "--from", parent_tree.revision, "--to", str(tree.revision)]
        else:
            args = ["diff", "--git", "-r", str(tree.revision)]
        yield from parse_git_diff(self._runner.run(args))

    def shortest_unique_prefix_len(self, object_id: str, kind: IdKind) -> int:
        if kind == "commit":
            output = self._runner.log(object_id, "commit_id.shortest().prefix()")
        else:
            revision = self._change_to_commit.get(object_id, object_id)
            output = self._runner.log(revision, "change_id.shortest().prefix()")
        return len(output.strip()) or len(object_id)


_C_ESCAPES = {"a": 7, "b": 8, "t": 9, "n": 10, "v": 11, "f": 12, "r": 13, '"': 34, "\\": 92}


def unquote_path(path: str) -> str:
    """Undo git's C-style quoting of paths with unusual characters."""
    if len(path) < 2 or not (path.startswith('"') and path.endswith('"')):
        return path
    body = path[1:-1]
    raw = bytearray()
    i = 0
    while i < len(body):
        char = body[i]
        if char != "\\" or i + 1 == len(body):
            raw += char.encode("utf-8")
            i += 1
            continue
        octal = body[i + 1 : i + 4]
        if len(octal) == 3 and all(c in "01234567" for c in octal):
            raw.append(int(octal, 8) & 0xFF)
            i += 4
        else:
            escaped = body[i + 1]
            if escaped in _C_ESCAPES:
                raw.append(_C_ESCAPES[escaped])
            else:
                raw += f"\\{escaped}".encode("utf-8")
            i += 2
    return raw.decode("utf-8", errors="replace")


def _strip_side(path: str, side: str) -> str | None:
    path = unquote_path(path)
    if path.startswith(side):
        return path[len(side) :]
    return None


def _header_path(rest: str) -> str | None:
    # `a/<p> b/<p>` splits unambiguously only when both sides are equal.
    half = (len(rest) - 1) // 2
    if len(rest) % 2 == 0 or rest[half] != " ":
        return None
    old, new = _strip_side(rest[:half], "a/"), _strip_side(rest[half + 1 :], "b/")
    if old is not None and old == new:
        return new
    return None


def parse_git_diff(text: str) -> Iterator[FileDiff]:
    """Reduce git-format diff output to one FileDiff per path.

    Paths come from the ``---``/``+++`` and rename/copy lines; the
    ``diff --git`` header is only used for entries without them, such as
    mode changes and binary files.
    """
    started = False
    path: str | None = None
    source: str | None = None
    added = removed = 0
    in_hunk = False

    for line in text.splitlines():
        if line.startswith("diff --git "):
            if path is not None:
                yield FileDiff(path=path, lines_added=added, lines_removed=removed, source_path=source)
            started = True
            path = _header_path(line[len("diff --git ") :])
            source = None
            added = removed = 0
            in_hunk = False
        elif not started:
            continue
        elif in_hunk:
            if line.startswith("+"):
                added += 1
            elif line.startswith("-"):
                removed += 1
        elif line.startswith("@@"):
            in_hunk = True
        elif line.startswith(("rename from ", "copy from ")):
            source = unquote_path(line.split(" from ", 1)[1])
        elif line.startswith(("rename to ", "copy to ")):
            path = unquote_path(line.split(" to ", 1)[1])
        elif line.startswith("+++ "):
            path = _strip_side(line[4:], "b/") or path
        elif line.startswith("--- ") and path is None:
            path = _strip_side(line[4:], "a/")

    if path is not None:
        yield FileDiff(path=path, lines_added=added, lines_removed=removed, source_path=source)


class JjCliWorkspace(Workspace):
    def __init__(self, root: Path, runner: JjRunner) -> None:
        self._root = root
        self._runner = runner

    @property
    def name(self) -> str:
        return "default"

    @property
    def root(self) -> Path:
        return self._root

    def repo(self) -> JjCliRepository:
        return JjCliRepository(self._runner)


class JjCliEngine(Engine):
    """Engine backed by the ``jj`` executable found on PATH."""

    def __init__(self, *, cwd: Path | None = None, executable: str = "jj") -> None:
        self.cwd = cwd or Path.cwd()
        self.executable = executable

    def load_workspace(self, *, snapshot: bool) -> JjCliWorkspace:
        runner = JjRunner(executable=self.executable, cwd=self.cwd, ignore_working_copy=not snapshot)
        # Snapshots the working copy unless --ignore-working-copy is set.
        root = Path(runner.run(["workspace", "root"]).strip())
        logger.debug("Loaded jj workspace at %s (snapshot=%s)", root, snapshot)
        # Later commands need not snapshot again.
        runner.ignore_working_copy = True
        runner.cwd = root
        return JjCliWorkspace(root, runner)

"""Shared test fixtures for starship-jj.

Provides an in-memory repository with a short linear history, the engine and
cache over it, and helpers for rendering a prompt to a string.
"""

import io
import os
import re

import pytest

from starship_jj.config import ENV_PREFIX, Config
from starship_jj.render import RenderPipeline
from starship_jj.state import RepoStateCache

from memory_engine import MemoryEngine, MemoryRepository

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub("", text)


def render(engine: MemoryEngine, config: Config | None = None, **kwargs) -> str:
    """Run the pipeline over ``engine`` and return everything written."""
    stream = io.StringIO()
    cache = RepoStateCache(engine)
    RenderPipeline(config or Config(), cache, stream, **kwargs).run()
    return stream.getvalue()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch):
    """Keep SJJ__ variables from the calling shell out of every test."""
    for name in list(os.environ):
        if name.upper().startswith(ENV_PREFIX):
            monkeypatch.delenv(name)


@pytest.fixture
def repo() -> MemoryRepository:
    """Linear history a1 <- b2 <- c3 with ``main`` on b2 and @ at c3.

    c3 changes one line of ``src.py`` and adds the two-line ``notes.txt``.
    """
    r = MemoryRepository()
    r.add_commit("a1", description="init\n", files={"README.md": "hello\n"})
    r.add_commit(
        "b2",
        parents=["a1"],
        description="add feature\n",
        files={"README.md": "hello\n", "src.py": "x = 1\n"},
    )
    r.add_commit(
        "c3",
        parents=["b2"],
        description="fix bug\n",
        files={"README.md": "hello\n", "src.py": "x = 2\n", "notes.txt": "a\nb\n"},
    )
    r.set_bookmark("main", "b2")
    r.set_working_copy("c3")
    return r


@pytest.fixture
def engine(repo: MemoryRepository) -> MemoryEngine:
    return MemoryEngine(repo)


@pytest.fixture
def cache(engine: MemoryEngine) -> RepoStateCache:
    return RepoStateCache(engine)

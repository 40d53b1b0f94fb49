"""Output modules, selected in configuration by their ``type`` tag."""

from __future__ import annotations

from typing import Annotated, Union

from pydantic import Field

from starship_jj.modules.bookmarks import Bookmarks
from starship_jj.modules.commit import Commit
from starship_jj.modules.common import PromptModule, fold_style_fields
from starship_jj.modules.metrics import MetricItem, Metrics
from starship_jj.modules.state import State, StateItem
from starship_jj.modules.symbol import Symbol

ModuleConfig = Annotated[
    Union[Symbol, Bookmarks, Commit, State, Metrics],
    Field(discriminator="type"),
]


def default_modules() -> list[ModuleConfig]:
    return [Symbol(), Bookmarks(), Commit(), State(), Metrics()]


__all__ = [
    "Bookmarks",
    "Commit",
    "MetricItem",
    "Metrics",
    "ModuleConfig",
    "PromptModule",
    "State",
    "StateItem",
    "Symbol",
    "default_modules",
    "fold_style_fields",
]

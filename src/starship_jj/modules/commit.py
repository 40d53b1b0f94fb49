"""Prints the working-copy commit's description and, optionally, its ids."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from starship_jj.context import ShortId
from starship_jj.modules.common import fold_style_fields
from starship_jj.style import Style, truncate

if TYPE_CHECKING:
    from starship_jj.context import PromptContext, PromptData
    from starship_jj.engine.protocols import IdKind
    from starship_jj.render import RenderState

DEFAULT_STYLE = Style()
DEFAULT_ID_PREFIX_STYLE = Style(color="Magenta", bold=True)
DEFAULT_ID_REST_STYLE = Style(color="BrightBlack")

_LINE_BREAK = re.compile(r"[\r\n]")


def shorten_id(object_id: str, prefix_len: int, length: int) -> ShortId:
    """Abbreviate an id, never below its unique prefix."""
    shown = object_id[: max(length, prefix_len)]
    return ShortId(prefix=shown[:prefix_len], rest=shown[prefix_len:])


class Commit(BaseModel):
    """Prints the working copy's commit text."""

    type: Literal["Commit"] = "Commit"
    previous_message_symbol: str = "⇣"
    """Printed after the description when the parent's description is shown."""
    max_length: Optional[int] = Field(default=24, ge=0)
    """Maximum display width the commit text will be truncated to."""
    show_previous_if_empty: bool = False
    """Show the parent's description when the current one is empty."""
    empty_text: str = "(no description set)"
    """Printed when the current revision has no description yet."""
    style: Style = Style()
    surround_with_quotes: bool = True
    show_change_id: bool = False
    show_commit_id: bool = False
    id_length: int = Field(default=8, ge=1)
    id_prefix_style: Style = Style()
    """Style of the shortest unique prefix of an id."""
    id_rest_style: Style = Style()

    @model_validator(mode="before")
    @classmethod
    def fold_style(cls, data: Any) -> Any:
        return fold_style_fields(data)

    def parse(self, context: PromptContext) -> None:
        data = context.data.commit
        cache = context.cache

        if self.show_change_id and data.change_id is None:
            data.change_id = self._short_id(context, "change")
        if self.show_commit_id and data.commit_id is None:
            data.commit_id = self._short_id(context, "commit")

        if data.desc is not None:
            return
        commit = cache.working_copy_commit()
        if commit is None:
            return

        if not commit.description and self.show_previous_if_empty:
            parents = cache.parent_commits()
            if len(parents) != 1:
                return
            data.desc = parents[0].description
            data.ahead = True
        else:
            data.desc = commit.description

    def _short_id(self, context: PromptContext, kind: IdKind) -> ShortId | None:
        commit = context.cache.working_copy_commit()
        if commit is None:
            return None
        object_id = commit.change_id if kind == "change" else commit.commit_id
        prefix_len = context.cache.repository().shortest_unique_prefix_len(object_id, kind)
        return shorten_id(object_id, prefix_len, self.id_length)

    def render(self, out: RenderState, data: PromptData, module_separator: str) -> None:
        commit = data.commit
        ids = [
            short
            for show, short in ((self.show_change_id, commit.change_id), (self.show_commit_id, commit.commit_id))
            if show and short is not None
        ]
        for index, short in enumerate(ids):
            if index:
                out.write(" ")
            out.style(self.id_prefix_style, DEFAULT_ID_PREFIX_STYLE)
            out.write(short.prefix)
            out.style(self.id_rest_style, DEFAULT_ID_REST_STYLE)
            out.write(short.rest)

        if commit.desc is None:
            if ids:
                out.write(module_separator)
            return
        if ids:
            out.write(" ")

        first_line = _LINE_BREAK.split(commit.desc, maxsplit=1)[0]
        text = first_line if commit.desc else self.empty_text
        out.style(self.style, DEFAULT_STYLE)
        out.write(truncate(text, self.max_length, self.surround_with_quotes))
        if commit.ahead:
            out.write(self.previous_message_symbol)
        out.write(module_separator)

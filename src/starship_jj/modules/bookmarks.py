"""Prints the bookmarks nearest to the working copy."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Optional

from pydantic import BaseModel, Field, model_validator

from starship_jj.bookmarks import BookmarkResolver, IgnoreEmpty, ordered_bookmarks
from starship_jj.modules.common import fold_style_fields
from starship_jj.style import ELLIPSIS, Style, truncate

if TYPE_CHECKING:
    from starship_jj.context import PromptContext, PromptData
    from starship_jj.render import RenderState

DEFAULT_STYLE = Style(color="Magenta")


class Bookmarks(BaseModel):
    """Prints information about bookmarks in the working copy's ancestors."""

    type: Literal["Bookmarks"] = "Bookmarks"
    separator: str = " "
    """Text that will be rendered between each bookmark."""
    style: Style = Style()
    behind_symbol: Optional[str] = "⇡"
    """Printed with the distance when a bookmark is behind the working copy."""
    max_bookmarks: Optional[int] = Field(default=1, ge=0)
    """Maximum amount of bookmarks that will be rendered."""
    max_length: Optional[int] = Field(default=None, ge=0)
    """Maximum display width a bookmark name will be truncated to."""
    surround_with_quotes: bool = False
    ignore_empty_commits: IgnoreEmpty = IgnoreEmpty.NONE
    """Leave commits without description out of the distance."""

    @model_validator(mode="before")
    @classmethod
    def fold_style(cls, data: Any) -> Any:
        return fold_style_fields(data)

    def parse(self, context: PromptContext) -> None:
        resolved = context.data.bookmarks.by_mode
        if self.ignore_empty_commits in resolved:
            return
        settings = context.config.bookmarks
        resolver = BookmarkResolver(
            context.cache,
            search_depth=settings.search_depth,
            exclude=settings.exclude,
            ignore_empty=self.ignore_empty_commits,
        )
        resolved[self.ignore_empty_commits] = resolver.resolve()

    def render(self, out: RenderState, data: PromptData, module_separator: str) -> None:
        bookmarks = ordered_bookmarks(data.bookmarks.by_mode.get(self.ignore_empty_commits, {}))
        if not bookmarks:
            return

        out.style(self.style, DEFAULT_STYLE)
        for index, bookmark in enumerate(bookmarks):
            if self.max_bookmarks is not None and index >= self.max_bookmarks:
                out.write(f"{self.separator}{ELLIPSIS}" if index else ELLIPSIS)
                break
            if index:
                out.write(self.separator)
            out.write(truncate(bookmark.name, self.max_length, self.surround_with_quotes))
            if bookmark.distance:
                out.write(f"{self.behind_symbol or ''}{bookmark.distance}")
        out.write(module_separator)

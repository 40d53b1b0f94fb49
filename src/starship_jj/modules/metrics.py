"""Prints how many files and lines the working-copy commit changes."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, model_validator

from starship_jj.modules.common import fold_style_fields
from starship_jj.style import Style

if TYPE_CHECKING:
    from starship_jj.context import PromptContext, PromptData
    from starship_jj.diffstat import DiffStats
    from starship_jj.render import RenderState

DEFAULT_STYLE = Style(color="Magenta")
DEFAULT_ITEM_STYLES = {
    "changed": Style(color="Cyan"),
    "added": Style(color="Green"),
    "removed": Style(color="Red"),
}

_PLACEHOLDER = re.compile(r"\{(changed|added|removed)\}")


class MetricItem(BaseModel):
    """One counter of the template."""

    prefix: str = ""
    suffix: str = ""
    style: Style = Style()
    disabled: bool = False

    @model_validator(mode="before")
    @classmethod
    def fold_style(cls, data: Any) -> Any:
        return fold_style_fields(data)


class Metrics(BaseModel):
    """Prints changed files, added and removed lines.

    ``template`` is plain text with the placeholders ``{changed}``,
    ``{added}`` and ``{removed}``; the text is drawn in ``style`` and each
    placeholder in its item's style.
    """

    type: Literal["Metrics"] = "Metrics"
    template: str = "[{changed} {added}{removed}]"
    style: Style = Style()
    changed_files: MetricItem = MetricItem()
    added_lines: MetricItem = MetricItem(prefix="+")
    removed_lines: MetricItem = MetricItem(prefix="-")

    @model_validator(mode="before")
    @classmethod
    def fold_style(cls, data: Any) -> Any:
        return fold_style_fields(data)

    def parse(self, context: PromptContext) -> None:
        data = context.data.commit
        if data.diff_parsed:
            return
        data.diff = context.cache.diff_stats()
        data.diff_parsed = True

    def _item(self, placeholder: str, diff: DiffStats) -> tuple[MetricItem, int]:
        if placeholder == "changed":
            return self.changed_files, diff.files_changed
        if placeholder == "added":
            return self.added_lines, diff.lines_added
        return self.removed_lines, diff.lines_removed

    def render(self, out: RenderState, data: PromptData, module_separator: str) -> None:
        diff = data.commit.diff
        if diff is None or diff.is_empty():
            return

        position = 0
        for match in _PLACEHOLDER.finditer(self.template):
            literal = self.template[position : match.start()]
            if literal:
                out.style(self.style, DEFAULT_STYLE)
                out.write(literal)
            position = match.end()

            placeholder = match.group(1)
            item, count = self._item(placeholder, diff)
            if item.disabled:
                continue
            out.style(item.style, DEFAULT_ITEM_STYLES[placeholder])
            out.write(f"{item.prefix}{count}{item.suffix}")

        tail = self.template[position:]
        if tail:
            out.style(self.style, DEFAULT_STYLE)
            out.write(tail)
        out.write(module_separator)

"""Prints warnings about the working-copy commit's state."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal, Optional

from pydantic import BaseModel, model_validator

from starship_jj.modules.common import fold_style_fields
from starship_jj.style import Style

if TYPE_CHECKING:
    from starship_jj.context import PromptContext, PromptData
    from starship_jj.render import RenderState

# Rendering order and per-warning defaults.
WARNINGS = ("conflict", "divergent", "hidden", "immutable", "empty")
DEFAULT_TEXT = {
    "conflict": "(CONFLICT)",
    "divergent": "(DIVERGENT)",
    "hidden": "(HIDDEN)",
    "immutable": "(IMMUTABLE)",
    "empty": "(EMPTY)",
}
DEFAULT_STYLES = {
    "conflict": Style(color="Red"),
    "divergent": Style(color="Cyan"),
    "hidden": Style(color="Yellow"),
    "immutable": Style(color="Yellow"),
    "empty": Style(color="Yellow"),
}


class StateItem(BaseModel):
    """One warning: its text, style and whether it is checked at all."""

    text: Optional[str] = None
    style: Style = Style()
    disabled: bool = False

    @model_validator(mode="before")
    @classmethod
    def fold_style(cls, data: Any) -> Any:
        return fold_style_fields(data)


class State(BaseModel):
    """Prints conflict/divergent/hidden/immutable/empty warnings."""

    type: Literal["State"] = "State"
    separator: str = " "
    """Text that will be printed between each warning."""
    conflict: StateItem = StateItem()
    divergent: StateItem = StateItem()
    hidden: StateItem = StateItem()
    immutable: StateItem = StateItem()
    empty: StateItem = StateItem()

    def parse(self, context: PromptContext) -> None:
        warnings = context.data.commit.warnings
        pending = [
            name
            for name in WARNINGS
            if not getattr(self, name).disabled and getattr(warnings, name) is None
        ]
        if not pending:
            return

        commit = context.cache.working_copy_commit()
        if commit is None:
            return
        for name in pending:
            if name == "empty":
                warnings.empty = context.cache.commit_is_empty()
            else:
                setattr(warnings, name, getattr(commit, name))

    def render(self, out: RenderState, data: PromptData, module_separator: str) -> None:
        warnings = data.commit.warnings
        active = [
            name
            for name in WARNINGS
            if not getattr(self, name).disabled and getattr(warnings, name)
        ]
        if not active:
            return

        for index, name in enumerate(active):
            item: StateItem = getattr(self, name)
            if index:
                out.write(self.separator)
            out.style(item.style, DEFAULT_STYLES[name])
            out.write(DEFAULT_TEXT[name] if item.text is None else item.text)
        out.write(module_separator)

"""Contract shared by the prompt modules."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from starship_jj.style import STYLE_FIELDS

if TYPE_CHECKING:
    from starship_jj.context import PromptContext, PromptData
    from starship_jj.render import RenderState


class PromptModule(Protocol):
    """A configured output module.

    ``parse`` populates exactly the facts the module needs and is idempotent;
    ``render`` writes the module's text, followed by the module separator when
    it wrote anything.
    """

    type: str

    def parse(self, context: PromptContext) -> None: ...

    def render(self, out: RenderState, data: PromptData, module_separator: str) -> None: ...


def fold_style_fields(data: Any) -> Any:
    """Move flat style keys of a table (``color = "Red"``) under ``style``."""
    if not isinstance(data, dict):
        return data
    flat = {key: value for key, value in data.items() if key in STYLE_FIELDS}
    if not flat:
        return data
    folded = {key: value for key, value in data.items() if key not in STYLE_FIELDS}
    style = folded.get("style") or {}
    if not isinstance(style, dict):
        style = style.model_dump(exclude_none=True)
    folded["style"] = {**flat, **style}
    return folded

"""Prints a fixed symbol, usually the jj logo."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import BaseModel, model_validator

from starship_jj.modules.common import fold_style_fields
from starship_jj.style import Style

if TYPE_CHECKING:
    from starship_jj.context import PromptContext, PromptData
    from starship_jj.render import RenderState

DEFAULT_STYLE = Style(color="Blue")


class Symbol(BaseModel):
    """Prints a symbol in front of the jj segment."""

    type: Literal["Symbol"] = "Symbol"
    symbol: str = "󱗆 "
    """Text that will be printed."""
    style: Style = Style()

    @model_validator(mode="before")
    @classmethod
    def fold_style(cls, data: Any) -> Any:
        return fold_style_fields(data)

    def parse(self, context: PromptContext) -> None:
        """Needs no repository facts."""

    def render(self, out: RenderState, data: PromptData, module_separator: str) -> None:
        if not self.symbol:
            return
        out.style(self.style, DEFAULT_STYLE)
        out.write(self.symbol)

"""Style composition and ANSI rendering.

A :class:`Style` is what the user configures: every field optional, missing
fields inherited from a fallback at render time.  Rendering merges with the
fallback, converts to an :class:`AnsiStyle` and emits only the escape codes
needed to get from the previously emitted style to the new one.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Annotated, Any, Optional

from pydantic import BaseModel, BeforeValidator, PlainSerializer, WithJsonSchema
from rich.cells import get_character_cell_size
from rich.color import Color as RichColor
from rich.color import ColorParseError, ColorType

RESET = "\x1b[0m"
ELLIPSIS = "…"

NAMED_COLORS = (
    "Black",
    "Red",
    "Green",
    "Yellow",
    "Blue",
    "Magenta",
    "Cyan",
    "White",
    "BrightBlack",
    "BrightRed",
    "BrightGreen",
    "BrightYellow",
    "BrightBlue",
    "BrightMagenta",
    "BrightCyan",
    "BrightWhite",
)

_NAME_TO_NUMBER = {name.lower(): number for number, name in enumerate(NAMED_COLORS)}
_NAME_TO_NUMBER.update(
    {name.lower().replace("bright", "bright_"): n for name, n in zip(NAMED_COLORS[8:], range(8, 16))}
)


def parse_color(value: Any) -> RichColor:
    """Parse a configured colour into a canonical rich Color.

    Accepts the 16 named colours (``Magenta``, ``bright_magenta``...),
    ``#rrggbb`` and RGB tables (``{TrueColor = {r, g, b}}`` or ``{r, g, b}``).
    """
    if isinstance(value, RichColor):
        color = value
    elif isinstance(value, str):
        key = value.strip().lower()
        if key in _NAME_TO_NUMBER:
            return RichColor.from_ansi(_NAME_TO_NUMBER[key])
        if not key.startswith("#"):
            raise ValueError(f"Unknown color {value!r}; use one of {', '.join(NAMED_COLORS)} or #rrggbb")
        try:
            color = RichColor.parse(key)
        except ColorParseError as exc:
            raise ValueError(str(exc)) from None
    elif isinstance(value, dict):
        rgb = value.get("TrueColor", value)
        try:
            return RichColor.from_rgb(int(rgb["r"]), int(rgb["g"]), int(rgb["b"]))
        except (KeyError, TypeError) as exc:
            raise ValueError(f"RGB color needs r, g and b: {value!r}") from exc
    else:
        raise ValueError(f"Invalid color {value!r}")

    if color.type == ColorType.STANDARD and color.number is not None:
        return RichColor.from_ansi(color.number)
    if color.type == ColorType.TRUECOLOR and color.triplet is not None:
        return RichColor.from_rgb(*color.triplet)
    raise ValueError(f"Only the 16 named colors and 24-bit colors are supported, got {value!r}")


def serialize_color(color: RichColor) -> Any:
    if color.type == ColorType.TRUECOLOR and color.triplet is not None:
        red, green, blue = color.triplet
        return {"TrueColor": {"r": red, "g": green, "b": blue}}
    return NAMED_COLORS[color.number or 0]


Color = Annotated[
    RichColor,
    BeforeValidator(parse_color),
    PlainSerializer(serialize_color),
    WithJsonSchema(
        {
            "anyOf": [
                {"enum": list(NAMED_COLORS)},
                {"type": "string", "pattern": "^#[0-9a-fA-F]{6}$"},
                {
                    "type": "object",
                    "properties": {
                        "TrueColor": {
                            "type": "object",
                            "properties": {c: {"type": "integer"} for c in "rgb"},
                        }
                    },
                },
            ]
        }
    ),
]


_ATTRIBUTE_CODES = (
    ("bold", "1"),
    ("dimmed", "2"),
    ("italic", "3"),
    ("underline", "4"),
    ("blink", "5"),
    ("reverse", "7"),
    ("hidden", "8"),
    ("strikethrough", "9"),
)


@dataclass(frozen=True)
class AnsiStyle:
    """A fully resolved terminal style."""

    foreground: Optional[RichColor] = None
    background: Optional[RichColor] = None
    bold: bool = False
    dimmed: bool = False
    italic: bool = False
    underline: bool = False
    blink: bool = False
    reverse: bool = False
    hidden: bool = False
    strikethrough: bool = False

    def is_plain(self) -> bool:
        return self == AnsiStyle()

    def codes(self) -> list[str]:
        codes = [code for attribute, code in _ATTRIBUTE_CODES if getattr(self, attribute)]
        if self.foreground is not None:
            codes.extend(self.foreground.get_ansi_codes(foreground=True))
        if self.background is not None:
            codes.extend(self.background.get_ansi_codes(foreground=False))
        return codes

    def prefix(self) -> str:
        """Escape sequence applying this style from a plain terminal."""
        codes = self.codes()
        return f"\x1b[{';'.join(codes)}m" if codes else ""

    def _turns_off_anything(self, target: AnsiStyle) -> bool:
        for attribute, _ in _ATTRIBUTE_CODES:
            if getattr(self, attribute) and not getattr(target, attribute):
                return True
        if self.foreground is not None and target.foreground is None:
            return True
        return self.background is not None and target.background is None

    def infix(self, target: AnsiStyle) -> str:
        """Minimal escape sequence to go from this style to ``target``.

        Identical styles need nothing.  SGR has no per-attribute "off" that
        every terminal honours, so anything switched off costs a reset and the
        full target style; otherwise only the added attributes and changed
        colours are emitted.
        """
        if self == target:
            return ""
        if self._turns_off_anything(target):
            return RESET + target.prefix()
        extra = AnsiStyle(
            foreground=target.foreground if target.foreground != self.foreground else None,
            background=target.background if target.background != self.background else None,
            **{
                attribute: getattr(target, attribute) and not getattr(self, attribute)
                for attribute, _ in _ATTRIBUTE_CODES
            },
        )
        return extra.prefix()


class Style(BaseModel):
    """User-facing style; every field may be left unset."""

    color: Optional[Color] = None
    bg_color: Optional[Color] = None
    bold: Optional[bool] = None
    dimmed: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    blink: Optional[bool] = None
    reverse: Optional[bool] = None
    hidden: Optional[bool] = None
    strikethrough: Optional[bool] = None

    model_config = {"arbitrary_types_allowed": True, "frozen": True}

    def merge(self, fallback: Style | None) -> Style:
        """Fill unset fields from ``fallback``; set fields always win."""
        if fallback is None:
            return self
        return Style(
            **{
                name: value if (value := getattr(self, name)) is not None else getattr(fallback, name)
                for name in Style.model_fields
            }
        )

    def to_ansi(self) -> AnsiStyle:
        return AnsiStyle(
            foreground=self.color,
            background=self.bg_color,
            **{f.name: bool(getattr(self, f.name)) for f in fields(AnsiStyle)[2:]},
        )

    def format(self, fallback: Style | None, last_emitted: AnsiStyle | None) -> tuple[str, AnsiStyle]:
        """Return the escape prefix for this style and the new effective style.

        Args:
            fallback: Style supplying the fields this one leaves unset.
            last_emitted: Effective style of the previous span, or None for
                the first span.
        """
        effective = self.merge(fallback).to_ansi()
        if last_emitted is None:
            return effective.prefix(), effective
        return last_emitted.infix(effective), effective


STYLE_FIELDS = frozenset(Style.model_fields)


def merge(style: Style, fallback: Style | None) -> Style:
    return style.merge(fallback)


def render(style: Style, fallback: Style | None, last_emitted: AnsiStyle | None) -> tuple[str, AnsiStyle]:
    return style.format(fallback, last_emitted)


def display_width(text: str) -> int:
    return sum(get_character_cell_size(char) for char in text)


def truncate(text: str, max_width: int | None, quoted: bool = False) -> str:
    """Truncate ``text`` to a terminal display width.

    When the text is wider than ``max_width`` it is cut at the last character
    boundary whose cumulative width is still below the limit and ``…`` is
    appended.  Quotes, if requested, wrap the result after truncation.
    """
    quote = '"' if quoted else ""
    if max_width is None or display_width(text) <= max_width:
        return f"{quote}{text}{quote}"

    cut = 0
    width = 0
    for index, char in enumerate(text):
        if width >= max_width:
            break
        cut = index
        width += get_character_cell_size(char)
    return f"{quote}{text[:cut]}{ELLIPSIS}{quote}"

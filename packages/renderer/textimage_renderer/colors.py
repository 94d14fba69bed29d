"""Color parsing and the quick-pick swatch presets."""

from __future__ import annotations

from PIL import ImageColor

from .errors import InvalidColorError

TEXT_COLOR_PRESETS: tuple[str, ...] = (
    "#000000",
    "#ff0000",
    "#00ff00",
    "#0000ff",
    "#ffff00",
    "#ff00ff",
    "#00ffff",
    "#ffa500",
    "#800080",
    "#ffc0cb",
)

BACKGROUND_COLOR_PRESETS: tuple[str, ...] = (
    "#ffffff",
    "#f0f0f0",
    "#e0e0e0",
    "#d0d0d0",
    "#c0c0c0",
    "#a0a0a0",
    "#808080",
    "#606060",
    "#404040",
    "#202020",
)


def parse_color(value: str) -> tuple[int, int, int]:
    if not isinstance(value, str) or not value.strip():
        raise InvalidColorError(f"Invalid color: {value!r}")
    try:
        return ImageColor.getcolor(value.strip(), "RGB")  # type: ignore[return-value]
    except ValueError as exc:
        raise InvalidColorError(f"Invalid color: {value!r}") from exc


def is_valid_color(value: str) -> bool:
    try:
        parse_color(value)
    except InvalidColorError:
        return False
    return True


def to_hex(value: str) -> str:
    r, g, b = parse_color(value)
    return f"#{r:02x}{g:02x}{b:02x}"

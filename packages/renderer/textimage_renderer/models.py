"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

from .errors import FontLoadError

SURFACE_WIDTH = 800
SURFACE_HEIGHT = 400

FONT_SIZE_MIN = 12
FONT_SIZE_MAX = 120

DEFAULT_FONT_FAMILY = "Arial"
FONT_EXTENSIONS = ("ttf", "otf", "woff", "woff2")
EXPORT_FILENAME = "generated-text-image.png"


@dataclass(frozen=True)
class StyleState:
    text: str = "Hello World!"
    font_size_px: int = 48
    font_family: str = DEFAULT_FONT_FAMILY
    text_color: str = "#000000"
    background_color: str = "#ffffff"
    bold: bool = False
    italic: bool = False
    underline: bool = False

    def with_changes(self, **changes: Any) -> StyleState:
        return replace(self, **changes)


@dataclass(frozen=True)
class CustomFont:
    name: str
    source_filename: str


@dataclass(frozen=True)
class FontUpload:
    filename: str
    data: bytes = field(repr=False)
    mime_type: str | None = None


@dataclass(frozen=True)
class UnderlineSpec:
    x0: float
    x1: float
    y: float
    width: float


@dataclass
class LoadReport:
    loaded: list[CustomFont] = field(default_factory=list)
    errors: list[FontLoadError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

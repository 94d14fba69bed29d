"""Renderer package for styled text images."""

from .colors import BACKGROUND_COLOR_PRESETS, TEXT_COLOR_PRESETS, is_valid_color, parse_color, to_hex
from .errors import (
    FontDecodeError,
    FontLoadError,
    InvalidColorError,
    InvalidFontFileError,
    InvalidStyleError,
    TextImageError,
)
from .export import ImageExporter, encode_png, to_data_url
from .fonts import (
    SYSTEM_FONTS,
    FontLoader,
    FontRegistry,
    FontRequest,
    FontResolver,
    decode_font,
    font_name_for,
    system_font_paths,
    upload_from_path,
)
from .models import (
    DEFAULT_FONT_FAMILY,
    EXPORT_FILENAME,
    FONT_EXTENSIONS,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    SURFACE_HEIGHT,
    SURFACE_WIDTH,
    CustomFont,
    FontUpload,
    LoadReport,
    StyleState,
    UnderlineSpec,
)
from .text import TextRenderer, font_descriptor, underline_geometry

__all__ = [
    "BACKGROUND_COLOR_PRESETS",
    "DEFAULT_FONT_FAMILY",
    "EXPORT_FILENAME",
    "FONT_EXTENSIONS",
    "FONT_SIZE_MAX",
    "FONT_SIZE_MIN",
    "SURFACE_HEIGHT",
    "SURFACE_WIDTH",
    "SYSTEM_FONTS",
    "TEXT_COLOR_PRESETS",
    "CustomFont",
    "FontDecodeError",
    "FontLoadError",
    "FontLoader",
    "FontRegistry",
    "FontRequest",
    "FontResolver",
    "FontUpload",
    "ImageExporter",
    "InvalidColorError",
    "InvalidFontFileError",
    "InvalidStyleError",
    "LoadReport",
    "StyleState",
    "TextImageError",
    "TextRenderer",
    "UnderlineSpec",
    "decode_font",
    "encode_png",
    "font_descriptor",
    "font_name_for",
    "is_valid_color",
    "parse_color",
    "system_font_paths",
    "to_data_url",
    "to_hex",
    "underline_geometry",
    "upload_from_path",
]

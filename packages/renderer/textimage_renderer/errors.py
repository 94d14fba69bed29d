"""Error types raised by the renderer package."""

from __future__ import annotations


class TextImageError(Exception):
    pass


class InvalidColorError(TextImageError, ValueError):
    pass


class InvalidStyleError(TextImageError, ValueError):
    pass


class FontLoadError(TextImageError):
    """Base for per-file font upload failures. ``str()`` is the alert text."""

    def __init__(self, filename: str, message: str) -> None:
        super().__init__(message)
        self.filename = filename


class InvalidFontFileError(FontLoadError):
    def __init__(self, filename: str) -> None:
        super().__init__(
            filename,
            f"Invalid font file: {filename}. Please upload TTF, OTF, WOFF, or WOFF2 files.",
        )


class FontDecodeError(FontLoadError):
    def __init__(self, filename: str, reason: str | None = None) -> None:
        super().__init__(filename, f"Failed to load font: {filename}")
        self.reason = reason

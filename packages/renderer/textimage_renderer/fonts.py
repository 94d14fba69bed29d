"""Custom font registry, upload loader, and font resolution for rendering."""

from __future__ import annotations

import logging
import mimetypes
import re
from dataclasses import dataclass
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import Callable, Iterable

from PIL import ImageFont

from .errors import FontDecodeError, FontLoadError, InvalidFontFileError, InvalidStyleError
from .models import FONT_EXTENSIONS, CustomFont, FontUpload, LoadReport, StyleState

logger = logging.getLogger("textimage.fonts")

SYSTEM_FONTS: tuple[str, ...] = (
    "Arial",
    "Georgia",
    "Times New Roman",
    "Helvetica",
    "Verdana",
    "Courier New",
    "Impact",
    "Comic Sans MS",
    "Trebuchet MS",
    "Palatino",
)

# Face files per family as (regular, bold, italic, bold italic); "" marks a missing face.
_LIBERATION_SANS = ("LiberationSans-Regular.ttf", "LiberationSans-Bold.ttf", "LiberationSans-Italic.ttf", "LiberationSans-BoldItalic.ttf")
_LIBERATION_SERIF = ("LiberationSerif-Regular.ttf", "LiberationSerif-Bold.ttf", "LiberationSerif-Italic.ttf", "LiberationSerif-BoldItalic.ttf")
_LIBERATION_MONO = ("LiberationMono-Regular.ttf", "LiberationMono-Bold.ttf", "LiberationMono-Italic.ttf", "LiberationMono-BoldItalic.ttf")
_DEJAVU_SANS = ("DejaVuSans.ttf", "DejaVuSans-Bold.ttf", "DejaVuSans-Oblique.ttf", "DejaVuSans-BoldOblique.ttf")
_DEJAVU_SERIF = ("DejaVuSerif.ttf", "DejaVuSerif-Bold.ttf", "DejaVuSerif-Italic.ttf", "DejaVuSerif-BoldItalic.ttf")
_DEJAVU_MONO = ("DejaVuSansMono.ttf", "DejaVuSansMono-Bold.ttf", "DejaVuSansMono-Oblique.ttf", "DejaVuSansMono-BoldOblique.ttf")

_SYSTEM_FONT_FILES: dict[str, tuple[tuple[str, str, str, str], ...]] = {
    "Arial": (
        ("arial.ttf", "arialbd.ttf", "ariali.ttf", "arialbi.ttf"),
        ("Arial.ttf", "Arial Bold.ttf", "Arial Italic.ttf", "Arial Bold Italic.ttf"),
        _LIBERATION_SANS,
        _DEJAVU_SANS,
    ),
    "Georgia": (
        ("georgia.ttf", "georgiab.ttf", "georgiai.ttf", "georgiaz.ttf"),
        ("Georgia.ttf", "Georgia Bold.ttf", "Georgia Italic.ttf", "Georgia Bold Italic.ttf"),
        _DEJAVU_SERIF,
    ),
    "Times New Roman": (
        ("times.ttf", "timesbd.ttf", "timesi.ttf", "timesbi.ttf"),
        ("Times New Roman.ttf", "Times New Roman Bold.ttf", "Times New Roman Italic.ttf", "Times New Roman Bold Italic.ttf"),
        _LIBERATION_SERIF,
        _DEJAVU_SERIF,
    ),
    "Helvetica": (
        ("Helvetica.ttc", "", "", ""),
        _LIBERATION_SANS,
        _DEJAVU_SANS,
    ),
    "Verdana": (
        ("verdana.ttf", "verdanab.ttf", "verdanai.ttf", "verdanaz.ttf"),
        ("Verdana.ttf", "Verdana Bold.ttf", "Verdana Italic.ttf", "Verdana Bold Italic.ttf"),
        _DEJAVU_SANS,
    ),
    "Courier New": (
        ("cour.ttf", "courbd.ttf", "couri.ttf", "courbi.ttf"),
        ("Courier New.ttf", "Courier New Bold.ttf", "Courier New Italic.ttf", "Courier New Bold Italic.ttf"),
        _LIBERATION_MONO,
        _DEJAVU_MONO,
    ),
    "Impact": (
        ("impact.ttf", "", "", ""),
        ("Impact.ttf", "", "", ""),
    ),
    "Comic Sans MS": (
        ("comic.ttf", "comicbd.ttf", "comici.ttf", "comicz.ttf"),
        ("Comic Sans MS.ttf", "Comic Sans MS Bold.ttf", "", ""),
    ),
    "Trebuchet MS": (
        ("trebuc.ttf", "trebucbd.ttf", "trebucit.ttf", "trebucbi.ttf"),
        ("Trebuchet MS.ttf", "Trebuchet MS Bold.ttf", "Trebuchet MS Italic.ttf", "Trebuchet MS Bold Italic.ttf"),
    ),
    "Palatino": (
        ("pala.ttf", "palab.ttf", "palai.ttf", "palabi.ttf"),
        ("Palatino.ttc", "", "", ""),
        _DEJAVU_SERIF,
    ),
}

_DECODE_SIZE = 24
_DESCRIPTOR_RE = re.compile(r"^(?:(italic)\s+)?(?:(bold)\s+)?(\d+(?:\.\d+)?)px\s+(.+)$")


def font_name_for(filename: str) -> str:
    """Derive the selectable family name from an upload's filename."""
    name = Path(filename).name
    stem, dot, _ext = name.rpartition(".")
    return stem if dot and stem else name


def decode_font(data: bytes) -> None:
    ImageFont.truetype(BytesIO(data), size=_DECODE_SIZE)


def upload_from_path(path: Path) -> FontUpload:
    path = Path(path)
    mime_type, _ = mimetypes.guess_type(path.name)
    return FontUpload(filename=path.name, data=path.read_bytes(), mime_type=mime_type)


class FontRegistry:
    """Custom fonts registered for the current session, in upload order."""

    def __init__(self) -> None:
        self._fonts: dict[str, CustomFont] = {}
        self._data: dict[str, bytes] = {}
        self.revision = 0

    def register(self, font: CustomFont, data: bytes) -> None:
        if font.name in self._fonts:
            logger.info(f"replacing custom font {font.name}", extra={"event": "font_replaced"})
        self._fonts[font.name] = font
        self._data[font.name] = bytes(data)
        self.revision += 1

    def remove(self, name: str) -> CustomFont | None:
        font = self._fonts.pop(name, None)
        if font is not None:
            self._data.pop(name, None)
            self.revision += 1
        return font

    def fonts(self) -> list[CustomFont]:
        return list(self._fonts.values())

    def names(self) -> list[str]:
        return list(self._fonts.keys())

    def data(self, name: str) -> bytes | None:
        return self._data.get(name)

    def family_options(self) -> list[str]:
        options = list(SYSTEM_FONTS)
        options.extend(n for n in self._fonts if n not in SYSTEM_FONTS)
        return options

    def is_selectable(self, name: str) -> bool:
        return name in SYSTEM_FONTS or name in self._fonts

    def __contains__(self, name: object) -> bool:
        return name in self._fonts

    def __len__(self) -> int:
        return len(self._fonts)


class FontLoader:
    """Validates and decodes uploaded font files into a registry.

    Uploads are handled one at a time in the order given. A failing file is
    reported through ``on_error`` and skipped; the rest of the batch still loads.
    """

    def __init__(
        self,
        registry: FontRegistry,
        decoder: Callable[[bytes], object] = decode_font,
        on_error: Callable[[FontLoadError], None] | None = None,
    ) -> None:
        self.registry = registry
        self.decoder = decoder
        self.on_error = on_error
        self.loading = False

    @staticmethod
    def validate(upload: FontUpload) -> None:
        ext = Path(upload.filename).suffix.lower().lstrip(".")
        mime = (upload.mime_type or "").lower()
        if ext in FONT_EXTENSIONS or "font" in mime:
            return
        raise InvalidFontFileError(upload.filename)

    def load(self, uploads: Iterable[FontUpload]) -> LoadReport:
        report = LoadReport()
        self.loading = True
        try:
            for upload in uploads:
                try:
                    font = self._load_one(upload)
                except FontLoadError as exc:
                    self._report(exc)
                    report.errors.append(exc)
                    continue
                report.loaded.append(font)
        finally:
            self.loading = False
        return report

    def load_paths(self, paths: Iterable[Path]) -> LoadReport:
        report = LoadReport()
        for path in paths:
            try:
                upload = upload_from_path(path)
            except OSError as exc:
                error = FontDecodeError(Path(path).name, str(exc))
                self._report(error)
                report.errors.append(error)
                continue
            single = self.load([upload])
            report.loaded.extend(single.loaded)
            report.errors.extend(single.errors)
        return report

    def _load_one(self, upload: FontUpload) -> CustomFont:
        self.validate(upload)
        try:
            self.decoder(upload.data)
        except (OSError, ValueError) as exc:
            raise FontDecodeError(upload.filename, str(exc)) from exc

        font = CustomFont(name=font_name_for(upload.filename), source_filename=upload.filename)
        self.registry.register(font, upload.data)
        logger.info(f"font loaded {font.name}", extra={"event": "font_loaded", "font_file": upload.filename})
        return font

    def _report(self, error: FontLoadError) -> None:
        logger.warning(str(error), extra={"event": "font_load_failed", "font_file": error.filename})
        if self.on_error is not None:
            self.on_error(error)


@dataclass(frozen=True)
class FontRequest:
    family: str
    size: int
    bold: bool = False
    italic: bool = False

    @classmethod
    def from_state(cls, state: StyleState) -> FontRequest:
        return cls(family=state.font_family, size=state.font_size_px, bold=state.bold, italic=state.italic)

    @classmethod
    def from_descriptor(cls, descriptor: str) -> FontRequest:
        match = _DESCRIPTOR_RE.match(descriptor.strip())
        if not match:
            raise InvalidStyleError(f"Invalid font descriptor: {descriptor!r}")
        italic, bold, size, family = match.groups()
        return cls(family=family.strip(), size=int(float(size)), bold=bool(bold), italic=bool(italic))


@dataclass(frozen=True)
class ResolvedFont:
    font: ImageFont.FreeTypeFont
    synthetic_bold: bool = False
    synthetic_italic: bool = False


@lru_cache(maxsize=None)
def _locate(filename: str) -> str | None:
    if not filename:
        return None
    try:
        return str(ImageFont.truetype(filename, _DECODE_SIZE).path)
    except OSError:
        return None


def _style_index(bold: bool, italic: bool) -> int:
    return (1 if bold else 0) + (2 if italic else 0)


class FontResolver:
    """Maps a font request to a concrete Pillow face.

    Unknown families silently fall back to Pillow's built-in font, the same
    way a browser canvas substitutes its default face.
    """

    def __init__(self, registry: FontRegistry) -> None:
        self.registry = registry
        self._custom_cache: dict[tuple[str, int], ImageFont.FreeTypeFont] = {}
        self._cache_revision = registry.revision

    def resolve(self, request: FontRequest) -> ResolvedFont:
        if request.family in self.registry:
            font = self._custom_face(request.family, request.size)
            if font is not None:
                return ResolvedFont(font, synthetic_bold=request.bold, synthetic_italic=request.italic)
        elif request.family in _SYSTEM_FONT_FILES:
            resolved = self._system_face(request)
            if resolved is not None:
                return resolved
        return ResolvedFont(
            ImageFont.load_default(request.size),
            synthetic_bold=request.bold,
            synthetic_italic=request.italic,
        )

    def _custom_face(self, name: str, size: int) -> ImageFont.FreeTypeFont | None:
        if self._cache_revision != self.registry.revision:
            self._custom_cache.clear()
            self._cache_revision = self.registry.revision
        key = (name, size)
        if key in self._custom_cache:
            return self._custom_cache[key]
        data = self.registry.data(name)
        if data is None:
            return None
        try:
            font = ImageFont.truetype(BytesIO(data), size=size)
        except OSError:
            logger.debug(f"custom font {name} unusable, falling back", extra={"event": "font_fallback"})
            return None
        self._custom_cache[key] = font
        return font

    def _system_face(self, request: FontRequest) -> ResolvedFont | None:
        wanted = [(request.bold, request.italic), (request.bold, False), (False, request.italic), (False, False)]
        tried: set[tuple[bool, bool]] = set()
        for bold, italic in wanted:
            if (bold, italic) in tried:
                continue
            tried.add((bold, italic))
            path = self._find_face(request.family, _style_index(bold, italic))
            if path is not None:
                return ResolvedFont(
                    ImageFont.truetype(path, request.size),
                    synthetic_bold=request.bold and not bold,
                    synthetic_italic=request.italic and not italic,
                )
        return None

    @staticmethod
    def _find_face(family: str, style: int) -> str | None:
        for faces in _SYSTEM_FONT_FILES.get(family, ()):
            path = _locate(faces[style])
            if path is not None:
                return path
        return None


def system_font_paths() -> dict[str, str | None]:
    return {family: FontResolver._find_face(family, 0) for family in SYSTEM_FONTS}

"""Editor session: style state, custom font registry, and repaint scheduling."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import fields
from pathlib import Path
from typing import Callable, Iterable, Iterator

from PIL import Image

from textimage_renderer import (
    DEFAULT_FONT_FAMILY,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    FontLoader,
    FontLoadError,
    FontRegistry,
    FontUpload,
    ImageExporter,
    InvalidStyleError,
    LoadReport,
    StyleState,
    TextRenderer,
    parse_color,
)

from .logging_setup import get_logger

_STYLE_FIELDS = frozenset(f.name for f in fields(StyleState))
_FLAG_FIELDS = ("bold", "italic", "underline")

Listener = Callable[[Image.Image], None]


class EditorSession:
    """Owns the style state and repaints the surface whenever it changes.

    The registry is passed explicitly to the loader and the renderer so the
    font selector and the drawing code always see the same custom fonts. A
    session starts with an empty registry and paints once on construction.
    """

    def __init__(
        self,
        state: StyleState | None = None,
        registry: FontRegistry | None = None,
        renderer: TextRenderer | None = None,
        loader: FontLoader | None = None,
        exporter: ImageExporter | None = None,
        on_font_error: Callable[[FontLoadError], None] | None = None,
    ) -> None:
        self.logger = get_logger("session")
        self.registry = registry if registry is not None else FontRegistry()
        self.renderer = renderer or TextRenderer(self.registry)
        self.loader = loader or FontLoader(self.registry, on_error=on_font_error)
        self.exporter = exporter or ImageExporter(Path.cwd())
        self._listeners: list[Listener] = []
        self._batch_depth = 0
        self._dirty = False

        state = state or StyleState()
        if not self.registry.is_selectable(state.font_family):
            state = state.with_changes(font_family=DEFAULT_FONT_FAMILY)
        self._state = state
        self.repaint()

    @property
    def state(self) -> StyleState:
        return self._state

    @property
    def surface(self) -> Image.Image | None:
        return self.renderer.surface

    @property
    def render_count(self) -> int:
        return self.renderer.render_count

    @property
    def font_loading(self) -> bool:
        return self.loader.loading

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def update(self, **changes) -> StyleState:
        unknown = set(changes) - _STYLE_FIELDS
        if unknown:
            raise InvalidStyleError(f"Unknown style field(s): {', '.join(sorted(unknown))}")

        normalized = {name: self._normalize(name, value) for name, value in changes.items()}
        new_state = self._state.with_changes(**normalized)
        if new_state == self._state:
            return self._state

        self._state = new_state
        self._invalidate()
        return new_state

    @contextmanager
    def batch(self) -> Iterator[EditorSession]:
        """Coalesce every update made inside the block into one repaint."""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._dirty = False
                self.repaint()

    def repaint(self) -> Image.Image:
        surface = self.renderer.render(self._state)
        for listener in list(self._listeners):
            listener(surface)
        return surface

    def font_options(self) -> list[str]:
        return self.registry.family_options()

    def select_font(self, name: str) -> StyleState:
        return self.update(font_family=name)

    def load_fonts(self, uploads: Iterable[FontUpload]) -> LoadReport:
        return self._after_load(self.loader.load(uploads))

    def load_font_files(self, paths: Iterable[Path]) -> LoadReport:
        return self._after_load(self.loader.load_paths(paths))

    def remove_font(self, name: str) -> bool:
        removed = self.registry.remove(name)
        if removed is None:
            return False
        self.logger.info(f"custom font removed {name}", extra={"event": "font_removed"})
        if self._state.font_family == name:
            self._state = self._state.with_changes(font_family=DEFAULT_FONT_FAMILY)
            self._invalidate()
        return True

    def export(self, directory: Path | None = None) -> Path | None:
        exporter = self.exporter
        if directory is not None:
            exporter = ImageExporter(Path(directory), exporter.filename, exporter.overwrite)
        return exporter.export(self.surface)

    def export_to(self, path: Path) -> Path | None:
        return self.exporter.export_to(self.surface, Path(path))

    def _after_load(self, report: LoadReport) -> LoadReport:
        if any(font.name == self._state.font_family for font in report.loaded):
            # The active family got a new face.
            self._invalidate()
        return report

    def _invalidate(self) -> None:
        if self._batch_depth > 0:
            self._dirty = True
        else:
            self.repaint()

    def _normalize(self, name: str, value):
        if name == "font_size_px":
            try:
                size = int(value)
            except (TypeError, ValueError) as exc:
                raise InvalidStyleError(f"Invalid font size: {value!r}") from exc
            return max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, size))
        if name in ("text_color", "background_color"):
            parse_color(value)
            return value.strip()
        if name == "font_family":
            if not self.registry.is_selectable(value):
                raise InvalidStyleError(f"Unknown font family: {value!r}")
            return value
        if name in _FLAG_FIELDS:
            return bool(value)
        return str(value)

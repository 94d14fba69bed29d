"""Text surface renderer for the fixed 800x400 export canvas."""

from __future__ import annotations

import math
import re

from PIL import Image, ImageDraw

from .colors import parse_color
from .export import to_data_url
from .fonts import FontRegistry, FontRequest, FontResolver
from .models import SURFACE_HEIGHT, SURFACE_WIDTH, StyleState, UnderlineSpec

ITALIC_SKEW = math.tan(math.radians(14))

# fillText draws control whitespace as plain spaces; there is no line breaking.
_CONTROL_WS = re.compile(r"[\t\n\r\f\v]")


def font_descriptor(state: StyleState) -> str:
    parts = []
    if state.italic:
        parts.append("italic")
    if state.bold:
        parts.append("bold")
    parts.append(f"{state.font_size_px}px {state.font_family}")
    return " ".join(parts)


def underline_geometry(
    state: StyleState,
    text_width: float,
    width: int = SURFACE_WIDTH,
    height: int = SURFACE_HEIGHT,
) -> UnderlineSpec:
    x = width / 2
    y = height / 2 + state.font_size_px * 0.1
    return UnderlineSpec(
        x0=x - text_width / 2,
        x1=x + text_width / 2,
        y=y,
        width=max(1, state.font_size_px / 20),
    )


def _bold_stroke(size: int) -> int:
    return max(1, round(size / 36))


class TextRenderer:
    """Paints a style state centered on a fixed-size RGB surface."""

    def __init__(
        self,
        registry: FontRegistry | None = None,
        width: int = SURFACE_WIDTH,
        height: int = SURFACE_HEIGHT,
        resolver: FontResolver | None = None,
    ) -> None:
        self.registry = registry if registry is not None else FontRegistry()
        self.resolver = resolver or FontResolver(self.registry)
        self.width = width
        self.height = height
        self.render_count = 0
        self._surface: Image.Image | None = None

    @property
    def surface(self) -> Image.Image | None:
        return self._surface

    def render(self, state: StyleState) -> Image.Image:
        if self._surface is None:
            self._surface = Image.new("RGB", (self.width, self.height))
        self._paint(self._surface, state)
        self.render_count += 1
        return self._surface

    def render_image(self, state: StyleState) -> Image.Image:
        image = Image.new("RGB", (self.width, self.height))
        self._paint(image, state)
        return image

    def preview_data_url(self, state: StyleState) -> str:
        return to_data_url(self.render_image(state))

    def _paint(self, image: Image.Image, state: StyleState) -> None:
        background = parse_color(state.background_color)
        fill = parse_color(state.text_color)
        image.paste(background, (0, 0, self.width, self.height))

        request = FontRequest.from_state(state)
        resolved = self.resolver.resolve(request)
        text = _CONTROL_WS.sub(" ", state.text)
        x = self.width / 2
        y = self.height / 2
        stroke = _bold_stroke(request.size) if resolved.synthetic_bold else 0

        if text and resolved.synthetic_italic:
            mask = Image.new("L", image.size, 0)
            ImageDraw.Draw(mask).text(
                (x, y), text, font=resolved.font, fill=255, anchor="mm", stroke_width=stroke, stroke_fill=255
            )
            mask = mask.transform(
                image.size,
                Image.Transform.AFFINE,
                (1, ITALIC_SKEW, -ITALIC_SKEW * y, 0, 1, 0),
                resample=Image.Resampling.BICUBIC,
            )
            image.paste(fill, (0, 0, self.width, self.height), mask)
        elif text:
            ImageDraw.Draw(image).text(
                (x, y), text, font=resolved.font, fill=fill, anchor="mm", stroke_width=stroke, stroke_fill=fill
            )

        if state.underline:
            text_width = resolved.font.getlength(text)
            if text_width > 0:
                line = underline_geometry(state, text_width, self.width, self.height)
                ImageDraw.Draw(image).line(
                    [(line.x0, line.y), (line.x1, line.y)], fill=fill, width=max(1, round(line.width))
                )

"""PNG export of the rendered surface."""

from __future__ import annotations

import base64
import logging
from io import BytesIO
from pathlib import Path

from PIL import Image

from .models import EXPORT_FILENAME

logger = logging.getLogger("textimage.export")


def encode_png(image: Image.Image) -> bytes:
    buf = BytesIO()
    image.save(buf, format="PNG")
    return buf.getvalue()


def to_data_url(image: Image.Image) -> str:
    b64 = base64.b64encode(encode_png(image)).decode("ascii")
    return f"data:image/png;base64,{b64}"


class ImageExporter:
    """Saves the surface under a fixed filename, like a browser download."""

    def __init__(self, directory: Path, filename: str = EXPORT_FILENAME, overwrite: bool = False) -> None:
        self.directory = Path(directory)
        self.filename = filename
        self.overwrite = overwrite

    def target_path(self) -> Path:
        path = self.directory / self.filename
        if self.overwrite or not path.exists():
            return path
        stem, suffix = path.stem, path.suffix
        n = 1
        while True:
            candidate = self.directory / f"{stem} ({n}){suffix}"
            if not candidate.exists():
                return candidate
            n += 1

    def export(self, surface: Image.Image | None) -> Path | None:
        if surface is None:
            logger.debug("export skipped, surface never painted", extra={"event": "export_skipped"})
            return None
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.export_to(surface, self.target_path())

    def export_to(self, surface: Image.Image | None, path: Path) -> Path | None:
        if surface is None:
            logger.debug("export skipped, surface never painted", extra={"event": "export_skipped"})
            return None
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(encode_png(surface))
        logger.info(f"image exported to {path}", extra={"event": "image_exported", "path": str(path)})
        return path

"""Diagnostics payload and support bundle export."""

from __future__ import annotations

import json
import platform
import tempfile
import zipfile
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import PIL
from PIL import features

from textimage_renderer import system_font_paths

from .config import AppConfig, config_path, export_dir
from .logging_setup import log_dir


def build_doctor_payload(cfg: AppConfig) -> dict[str, Any]:
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "pillow": PIL.__version__,
        "features": {
            "freetype2": bool(features.check("freetype2")),
            "raqm": bool(features.check("raqm")),
        },
        "system_fonts": system_font_paths(),
        "export_dir": str(export_dir(cfg)),
        "config_path": str(config_path()),
        "config": asdict(cfg),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "TextImage") -> None:
        self.app_name = app_name

    def bundle(
        self,
        cfg: AppConfig,
        doctor_payload: dict[str, Any],
        output_dir: Path | None = None,
    ) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"textimage-diagnostics-{stamp}.zip"

        logs = log_dir()
        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_path()),
                "log_dir": str(logs),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(doctor_payload, indent=2, sort_keys=True, default=str))
            zf.writestr("config.json", json.dumps(asdict(cfg), indent=2, sort_keys=True))

            for item in sorted(logs.glob("*.log*")):
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path

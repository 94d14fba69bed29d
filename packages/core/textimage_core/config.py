"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any

from textimage_renderer import (
    DEFAULT_FONT_FAMILY,
    EXPORT_FILENAME,
    FONT_SIZE_MAX,
    FONT_SIZE_MIN,
    SYSTEM_FONTS,
    StyleState,
    is_valid_color,
)


CONFIG_VERSION = 1


@dataclass
class StyleConfig:
    text: str = "Hello World!"
    font_size_px: int = 48
    font_family: str = DEFAULT_FONT_FAMILY
    text_color: str = "#000000"
    background_color: str = "#ffffff"
    bold: bool = False
    italic: bool = False
    underline: bool = False


@dataclass
class ExportConfig:
    directory: str | None = None
    filename: str = EXPORT_FILENAME
    overwrite: bool = False


@dataclass
class UiConfig:
    remember_style: bool = True


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    style: StyleConfig = field(default_factory=StyleConfig)
    export: ExportConfig = field(default_factory=ExportConfig)
    ui: UiConfig = field(default_factory=UiConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_path() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "TextImage" / "config.json"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "TextImage" / "config.json"
    return Path.home() / ".config" / "textimage" / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_style(cfg: AppConfig) -> None:
    style = cfg.style
    defaults = StyleConfig()
    try:
        size = int(style.font_size_px)
    except (TypeError, ValueError):
        size = defaults.font_size_px
    style.font_size_px = max(FONT_SIZE_MIN, min(FONT_SIZE_MAX, size))
    # Uploaded fonts live only for one session.
    if style.font_family not in SYSTEM_FONTS:
        style.font_family = DEFAULT_FONT_FAMILY
    if not is_valid_color(style.text_color):
        style.text_color = defaults.text_color
    if not is_valid_color(style.background_color):
        style.background_color = defaults.background_color
    if not isinstance(style.text, str):
        style.text = defaults.text
    style.bold = bool(style.bold)
    style.italic = bool(style.italic)
    style.underline = bool(style.underline)


def _normalize_export(cfg: AppConfig) -> None:
    if not cfg.export.filename or not str(cfg.export.filename).strip():
        cfg.export.filename = EXPORT_FILENAME
    cfg.export.overwrite = bool(cfg.export.overwrite)


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(raw, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=int(raw.get("config_version", CONFIG_VERSION)),
        style=_merge(StyleConfig, raw.get("style", {})),
        export=_merge(ExportConfig, raw.get("export", {})),
        ui=_merge(UiConfig, raw.get("ui", {})),
        diagnostics=_merge(DiagnosticsConfig, raw.get("diagnostics", {})),
    )

    _normalize_style(cfg)
    _normalize_export(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def export_dir(cfg: AppConfig) -> Path:
    if cfg.export.directory:
        return Path(cfg.export.directory).expanduser()
    downloads = Path.home() / "Downloads"
    return downloads if downloads.is_dir() else Path.home()


def initial_state(cfg: AppConfig) -> StyleState:
    return StyleState(**asdict(cfg.style))


def remember_state(cfg: AppConfig, state: StyleState) -> None:
    if not cfg.ui.remember_style:
        return
    for f in fields(StyleConfig):
        setattr(cfg.style, f.name, getattr(state, f.name))
    if cfg.style.font_family not in SYSTEM_FONTS:
        cfg.style.font_family = DEFAULT_FONT_FAMILY

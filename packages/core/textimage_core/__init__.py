"""Core app services: editor session, settings, logging, and diagnostics."""

from .config import AppConfig, export_dir, initial_state, load_config, remember_state, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .session import EditorSession

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "EditorSession",
    "build_doctor_payload",
    "export_dir",
    "initial_state",
    "load_config",
    "remember_state",
    "save_config",
]

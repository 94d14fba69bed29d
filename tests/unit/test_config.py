import json
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from textimage_core.config import (
    AppConfig,
    export_dir,
    initial_state,
    load_config,
    remember_state,
    save_config,
)
from textimage_renderer import StyleState


class ConfigTests(unittest.TestCase):
    def test_load_default_when_missing(self):
        with tempfile.TemporaryDirectory() as tmp:
            cfg = load_config(Path(tmp) / "missing.json")
            self.assertIsInstance(cfg, AppConfig)
            self.assertEqual(cfg.style.font_family, "Arial")
            self.assertEqual(cfg.style.font_size_px, 48)
            self.assertEqual(cfg.export.filename, "generated-text-image.png")
            self.assertEqual(initial_state(cfg), StyleState())

    def test_save_and_reload(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            cfg = load_config(path)
            cfg.style.text = "Saved"
            cfg.style.bold = True
            cfg.export.directory = tmp
            save_config(cfg, path)
            reloaded = load_config(path)
            self.assertEqual(reloaded.style.text, "Saved")
            self.assertTrue(reloaded.style.bold)
            self.assertEqual(export_dir(reloaded), Path(tmp))

    def test_corrupt_file_falls_back(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            path.write_text("{not json", encoding="utf-8")
            self.assertEqual(load_config(path), AppConfig())

    def test_normalizes_out_of_range_values(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            raw = {
                "config_version": 1,
                "style": {
                    "font_size_px": 500,
                    "font_family": "MyUploadedFont",
                    "text_color": "nope",
                    "background_color": "#202020",
                    "shadow": True,
                },
                "export": {"filename": ""},
            }
            path.write_text(json.dumps(raw), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.style.font_size_px, 120)
            self.assertEqual(cfg.style.font_family, "Arial")
            self.assertEqual(cfg.style.text_color, "#000000")
            self.assertEqual(cfg.style.background_color, "#202020")
            self.assertFalse(hasattr(cfg.style, "shadow"))
            self.assertEqual(cfg.export.filename, "generated-text-image.png")

    def test_partial_file_keeps_defaults(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.json"
            partial = {"style": {"text": "Saved"}, "ui": {"remember_style": False}, "last_style": {"text": "Ignored"}}
            path.write_text(json.dumps(partial), encoding="utf-8")
            cfg = load_config(path)
            self.assertEqual(cfg.config_version, 1)
            self.assertEqual(cfg.style.text, "Saved")
            self.assertEqual(cfg.style.font_size_px, 48)
            self.assertFalse(cfg.ui.remember_style)
            self.assertEqual(cfg.export.filename, "generated-text-image.png")

    def test_remember_state_skips_custom_family(self):
        cfg = AppConfig()
        remember_state(cfg, StyleState(text="Keep", font_family="MyFont", italic=True))
        self.assertEqual(cfg.style.text, "Keep")
        self.assertTrue(cfg.style.italic)
        self.assertEqual(cfg.style.font_family, "Arial")

    def test_remember_state_disabled(self):
        cfg = AppConfig()
        cfg.ui.remember_style = False
        remember_state(cfg, StyleState(text="Ignored"))
        self.assertEqual(cfg.style.text, "Hello World!")


if __name__ == "__main__":
    unittest.main()

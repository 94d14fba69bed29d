import json
import logging
import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "core"))

from textimage_core.logging_setup import JsonFormatter, get_logger


class LoggingTests(unittest.TestCase):
    def test_json_formatter_includes_extras(self):
        record = logging.LogRecord("textimage.fonts", logging.WARNING, __file__, 1, "Failed to load font: x.ttf", None, None)
        record.event = "font_load_failed"
        record.font_file = "x.ttf"
        payload = json.loads(JsonFormatter().format(record))
        self.assertEqual(payload["level"], "WARNING")
        self.assertEqual(payload["logger"], "textimage.fonts")
        self.assertEqual(payload["event"], "font_load_failed")
        self.assertEqual(payload["font_file"], "x.ttf")
        self.assertNotIn("exc", payload)

    def test_child_loggers_share_root(self):
        self.assertEqual(get_logger().name, "textimage")
        self.assertEqual(get_logger("session").name, "textimage.session")
        self.assertIs(get_logger("fonts"), logging.getLogger("textimage.fonts"))


if __name__ == "__main__":
    unittest.main()

import sys
import tempfile
import unittest
from io import BytesIO
from pathlib import Path

from PIL import Image

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))

from textimage_renderer.export import ImageExporter, encode_png, to_data_url
from textimage_renderer.models import EXPORT_FILENAME


class ExportTests(unittest.TestCase):
    def setUp(self):
        self.image = Image.new("RGB", (800, 400), (10, 20, 30))

    def test_encode_png(self):
        data = encode_png(self.image)
        self.assertTrue(data.startswith(b"\x89PNG\r\n\x1a\n"))
        decoded = Image.open(BytesIO(data))
        self.assertEqual(decoded.size, (800, 400))
        self.assertEqual(decoded.format, "PNG")

    def test_data_url(self):
        self.assertTrue(to_data_url(self.image).startswith("data:image/png;base64,iVBOR"))

    def test_export_uses_fixed_filename(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = ImageExporter(Path(tmp)).export(self.image)
            self.assertEqual(path, Path(tmp) / EXPORT_FILENAME)
            self.assertEqual(path.name, "generated-text-image.png")
            self.assertTrue(path.exists())

    def test_export_never_painted_is_silent(self):
        with tempfile.TemporaryDirectory() as tmp:
            self.assertIsNone(ImageExporter(Path(tmp)).export(None))
            self.assertEqual(list(Path(tmp).iterdir()), [])

    def test_existing_file_gets_numbered_name(self):
        with tempfile.TemporaryDirectory() as tmp:
            exporter = ImageExporter(Path(tmp))
            first = exporter.export(self.image)
            second = exporter.export(self.image)
            third = exporter.export(self.image)
            self.assertEqual(first.name, "generated-text-image.png")
            self.assertEqual(second.name, "generated-text-image (1).png")
            self.assertEqual(third.name, "generated-text-image (2).png")

    def test_overwrite(self):
        with tempfile.TemporaryDirectory() as tmp:
            exporter = ImageExporter(Path(tmp), overwrite=True)
            exporter.export(self.image)
            exporter.export(self.image)
            self.assertEqual(len(list(Path(tmp).iterdir())), 1)

    def test_export_creates_directory(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = ImageExporter(Path(tmp) / "nested" / "out").export(self.image)
            self.assertTrue(path.exists())

    def test_export_to_creates_missing_parent(self):
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "new" / "x.png"
            path = ImageExporter(Path(tmp)).export_to(self.image, target)
            self.assertEqual(path, target)
            self.assertTrue(target.read_bytes().startswith(b"\x89PNG"))


if __name__ == "__main__":
    unittest.main()

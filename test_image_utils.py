import sys
import io
import base64
import shutil
import tempfile
import unittest
from pathlib import Path

from PIL import Image

# Add src to path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from bisaya_translator.image_utils import IMAGE_EXTENSIONS, ImageUpload, detect_mime_type


def image_bytes(fmt):
    buf = io.BytesIO()
    Image.new('RGB', (20, 10), color='white').save(buf, format=fmt)
    return buf.getvalue()


class FakeUploadedFile:
    def __init__(self, name, data, type):
        self.name = name
        self.type = type
        self._data = data

    def getvalue(self):
        return self._data


class TestImageUtils(unittest.TestCase):
    def test_detects_common_formats(self):
        self.assertEqual(detect_mime_type(image_bytes('PNG')), 'image/png')
        self.assertEqual(detect_mime_type(image_bytes('JPEG')), 'image/jpeg')

    def test_upload_widget_offers_less_common_formats(self):
        for ext in ('tif', 'tiff', 'avif', 'svg', 'ico', 'heic', 'webp'):
            self.assertIn(ext, IMAGE_EXTENSIONS)

    def test_detects_tiff_and_ico(self):
        self.assertEqual(detect_mime_type(image_bytes('TIFF')), 'image/tiff')
        buf = io.BytesIO()
        Image.new('RGB', (32, 32), color='white').save(buf, format='ICO')
        self.assertEqual(detect_mime_type(buf.getvalue()), 'image/x-icon')

    def test_rejects_non_images(self):
        with self.assertRaises(ValueError):
            detect_mime_type(b"just some text")

    def test_data_url_round_trips_bytes(self):
        data = image_bytes('PNG')
        upload = ImageUpload(name="a.png", data=data, mime_type="image/png")
        header, payload = upload.to_data_url().split(',', 1)
        self.assertEqual(header, "data:image/png;base64")
        self.assertEqual(base64.b64decode(payload), data)

    def test_from_uploaded_file_keeps_browser_type(self):
        data = image_bytes('PNG')
        upload = ImageUpload.from_uploaded_file(FakeUploadedFile("shot.png", data, "image/png"))
        self.assertEqual(upload.name, "shot.png")
        self.assertEqual(upload.data, data)
        self.assertEqual(upload.mime_type, "image/png")

    def test_from_uploaded_file_detects_missing_type(self):
        upload = ImageUpload.from_uploaded_file(FakeUploadedFile("photo", image_bytes('JPEG'), None))
        self.assertEqual(upload.mime_type, "image/jpeg")

    def test_from_path(self):
        tmp_dir = tempfile.mkdtemp()
        try:
            path = Path(tmp_dir) / "sign.png"
            path.write_bytes(image_bytes('PNG'))
            upload = ImageUpload.from_path(path)
        finally:
            shutil.rmtree(tmp_dir, ignore_errors=True)
        self.assertEqual(upload.name, "sign.png")
        self.assertEqual(upload.mime_type, "image/png")


if __name__ == '__main__':
    unittest.main()

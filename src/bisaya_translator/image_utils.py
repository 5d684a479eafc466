"""Helpers for handling the uploaded image in memory."""
from __future__ import annotations

import base64
import io
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Union

from PIL import Image, UnidentifiedImageError

# Extensions offered by the upload widget; anything Pillow can open is accepted after upload
IMAGE_EXTENSIONS = [
    'png', 'jpg', 'jpeg', 'webp', 'gif', 'bmp', 'tif', 'tiff',
    'heic', 'heif', 'avif', 'svg', 'ico',
]


@dataclass(frozen=True)
class ImageUpload:
    """An image selected by the user, held entirely in memory."""

    name: str
    data: bytes
    mime_type: str

    @classmethod
    def from_uploaded_file(cls, uploaded_file: Any) -> "ImageUpload":
        """Build from a Streamlit ``UploadedFile`` (or anything with name/type/getvalue)."""
        data = uploaded_file.getvalue()
        mime_type = getattr(uploaded_file, 'type', None) or detect_mime_type(data)
        return cls(name=uploaded_file.name, data=data, mime_type=mime_type)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "ImageUpload":
        path = Path(path)
        data = path.read_bytes()
        return cls(name=path.name, data=data, mime_type=detect_mime_type(data))

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode('utf-8')

    def to_data_url(self) -> str:
        """Display URL for the preview (the equivalent of an object URL)."""
        return f"data:{self.mime_type};base64,{self.to_base64()}"


def detect_mime_type(data: bytes) -> str:
    """
    Detect the MIME type of image bytes with Pillow.

    Raises:
        ValueError: if the bytes are not a recognised image
    """
    try:
        with Image.open(io.BytesIO(data)) as img:
            image_format = img.format
    except UnidentifiedImageError as e:
        raise ValueError("File is not a recognised image") from e

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ValueError(f"No MIME type known for image format {image_format}")
    return mime_type

"""
Data-URI helpers for uploaded images.
"""

import base64
import binascii
import io
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError


DATA_URI_SCHEME = "data:"


class ImageDecodeError(ValueError):
    """Raised when uploaded bytes cannot be read as an image"""


def detect_mime_type(file_bytes: bytes) -> str:
    """
    Identify the image format of raw bytes with Pillow.

    Raises:
        ImageDecodeError: if the bytes are not a readable image
    """
    try:
        with Image.open(io.BytesIO(file_bytes)) as img:
            img.verify()
            image_format = img.format
    except (UnidentifiedImageError, OSError, SyntaxError) as e:
        raise ImageDecodeError(f"Unreadable image: {e}") from e

    mime_type = Image.MIME.get(image_format or "")
    if not mime_type:
        raise ImageDecodeError(f"No MIME type known for format {image_format!r}")
    return mime_type


def encode_data_uri(file_bytes: bytes, mime_type: Optional[str] = None) -> str:
    """
    Encode raw image bytes as a ``data:<mime>;base64,<payload>`` string.

    The bytes are always checked with Pillow. A ``mime_type`` reported by
    the uploader takes precedence over the detected one.
    """
    detected = detect_mime_type(file_bytes)
    payload = base64.b64encode(file_bytes).decode("ascii")
    return f"{DATA_URI_SCHEME}{mime_type or detected};base64,{payload}"


def strip_data_uri_prefix(data_uri: str) -> str:
    """Return the part after the first comma, i.e. the bare base64 payload"""
    _, _, payload = data_uri.partition(",")
    return payload


def split_data_uri(data_uri: str) -> Tuple[str, bytes]:
    """
    Split a base64 data-URI into its MIME type and decoded bytes.

    Raises:
        ImageDecodeError: if the string is not a base64 data-URI
    """
    header, sep, payload = data_uri.partition(",")
    if not sep or not header.startswith(DATA_URI_SCHEME) or not header.endswith(";base64"):
        raise ImageDecodeError("Not a base64 data URI")

    mime_type = header[len(DATA_URI_SCHEME):-len(";base64")]
    try:
        return mime_type, base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise ImageDecodeError(f"Invalid base64 payload: {e}") from e

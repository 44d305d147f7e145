"""Helpers for the ``data:<mime>;base64,<payload>`` image convention.

Images travel through the app as data URLs. The scheme and MIME prefix is
stripped before bytes are handed to Gemini and re-attached to whatever comes
back, so the frontend can drop the string straight into an ``<img src>``.
"""

from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from typing import NamedTuple

from PIL import Image, UnidentifiedImageError

from backend.services.errors import InvalidImageError

logger = logging.getLogger(__name__)

DEFAULT_MIME_TYPE = "image/png"

# Input formats the Gemini image models take as-is
SUPPORTED_MIME_TYPES = frozenset({"image/png", "image/jpeg", "image/webp", "image/heic", "image/heif"})

_PNG_MODES = {"1", "L", "LA", "P", "RGB", "RGBA"}

_DATA_URL_RE = re.compile(r"^data:(?P<mime>[\w.+-]+/[\w.+-]+);base64,(?P<payload>.*)$", re.DOTALL)


class DecodedImage(NamedTuple):
    mime_type: str
    data: bytes


def split_data_url(data_url: str) -> tuple[str, str]:
    """Return ``(mime_type, base64_payload)`` for a data URL."""
    match = _DATA_URL_RE.match(data_url or "")
    if not match:
        raise InvalidImageError("Expected a data:<mime>;base64,<payload> image")
    return match.group("mime"), match.group("payload")


def strip_prefix(image: str) -> str:
    """Drop the ``data:<mime>;base64,`` prefix; bare base64 passes through."""
    match = _DATA_URL_RE.match(image or "")
    return match.group("payload") if match else image


def to_data_url(mime_type: str, payload: str) -> str:
    return f"data:{mime_type};base64,{payload}"


def decode(image: str) -> DecodedImage:
    """Decode a data URL (or bare base64, assumed PNG) into raw bytes."""
    match = _DATA_URL_RE.match(image or "")
    mime_type = match.group("mime") if match else DEFAULT_MIME_TYPE
    payload = match.group("payload") if match else image
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidImageError("Image payload is not valid base64") from exc
    if not data:
        raise InvalidImageError("Image payload is empty")
    return DecodedImage(mime_type, data)


def encode(data: bytes | str, mime_type: str | None = None) -> str:
    """Wrap raw bytes (or the base64 text the SDK sometimes returns) as a data URL."""
    if isinstance(data, str):
        payload = data
    else:
        payload = base64.b64encode(data).decode("ascii")
    return to_data_url(mime_type or DEFAULT_MIME_TYPE, payload)


def sniff_mime_type(data: bytes) -> str:
    """Identify the image format with Pillow and return its MIME type."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            fmt = img.format
            img.verify()
    except (UnidentifiedImageError, OSError, SyntaxError) as exc:
        raise InvalidImageError("Uploaded file is not a readable image") from exc

    mime_type = Image.MIME.get(fmt or "")
    if not mime_type:
        raise InvalidImageError(f"Unsupported image format: {fmt}")
    return mime_type


def to_png(data: bytes) -> bytes:
    """Re-encode any Pillow readable image as PNG (first frame only)."""
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.mode not in _PNG_MODES:
                img = img.convert("RGBA" if "A" in img.getbands() else "RGB")
            buf = io.BytesIO()
            img.save(buf, format="PNG")
    except (UnidentifiedImageError, OSError, ValueError) as exc:
        raise InvalidImageError("Image could not be converted to PNG") from exc
    return buf.getvalue()


def _accepted(data: bytes, mime_type: str) -> tuple[bytes, str]:
    if mime_type in SUPPORTED_MIME_TYPES:
        return data, mime_type
    logger.info("[ImageData] Converting %s to %s", mime_type, DEFAULT_MIME_TYPE)
    return to_png(data), DEFAULT_MIME_TYPE


def from_upload(data: bytes) -> str:
    """Turn an uploaded file body into a data URL Gemini accepts."""
    if not data:
        raise InvalidImageError("Uploaded file is empty")
    data, mime_type = _accepted(data, sniff_mime_type(data))
    logger.info("[ImageData] Accepted upload: %s, %d bytes", mime_type, len(data))
    return encode(data, mime_type)


def normalize(image: str) -> str:
    """Validate a client supplied image and return it as a data URL labelled with its real MIME type.

    Formats outside ``SUPPORTED_MIME_TYPES`` (GIF, BMP, TIFF, ...) are
    re-encoded as PNG.
    """
    decoded = decode(image)
    mime_type = sniff_mime_type(decoded.data)
    if mime_type not in SUPPORTED_MIME_TYPES:
        return encode(*_accepted(decoded.data, mime_type))
    if mime_type != decoded.mime_type:
        logger.info("[ImageData] Declared %s but content is %s", decoded.mime_type, mime_type)
    return to_data_url(mime_type, strip_prefix(image))

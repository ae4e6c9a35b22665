import base64
import binascii
import io
import re
from typing import Optional, Tuple

from PIL import Image, UnidentifiedImageError
from pillow_heif import register_heif_opener

from app.core.errors import UploadError
from app.core.logging_config import logger

register_heif_opener()

DATA_URL_RE = re.compile(r"^data:([^;,]+);base64,(.+)$", re.DOTALL)

MIME_TO_EXT = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/heic": "jpg",
    "image/heif": "jpg",
}

HEIC_TYPES = {"image/heic", "image/heif"}
HEIC_SUFFIXES = (".heic", ".heif")
JPEG_QUALITY = 90


def ext_for_content_type(content_type: Optional[str]) -> str:
    return MIME_TO_EXT.get((content_type or "").lower(), "jpg")


def ext_for_upload(content_type: Optional[str], filename: Optional[str] = None) -> str:
    return "jpg" if is_heic(content_type, filename) else ext_for_content_type(content_type)


def content_type_for_ext(ext: str) -> str:
    return "image/jpeg" if ext == "jpg" else f"image/{ext}"


def is_data_url(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.startswith("data:")


def is_remote_url(value: Optional[str]) -> bool:
    return isinstance(value, str) and value.startswith(("http://", "https://"))


def parse_data_url(data_url: str, max_bytes: int) -> Optional[Tuple[bytes, str]]:
    """
    Decode a ``data:<mime>;base64,<payload>`` URL.

    Returns ``(bytes, content_type)`` or None when the URL is malformed, not an
    image, not valid base64, or larger than ``max_bytes``.
    """
    match = DATA_URL_RE.match(data_url)
    if not match:
        return None
    content_type = match.group(1).strip().lower()
    if not content_type.startswith("image/"):
        return None
    try:
        data = base64.b64decode(match.group(2), validate=True)
    except (binascii.Error, ValueError):
        return None
    if len(data) > max_bytes:
        return None
    return data, content_type


def is_heic(content_type: Optional[str], filename: Optional[str] = None) -> bool:
    if (content_type or "").lower() in HEIC_TYPES:
        return True
    return bool(filename) and filename.lower().endswith(HEIC_SUFFIXES)


def normalize_image(data: bytes, content_type: str, filename: Optional[str] = None) -> Tuple[bytes, str]:
    """
    Convert HEIC/HEIF stills to JPEG so browsers can render them.
    Other formats are returned unchanged.
    """
    if not is_heic(content_type, filename):
        return data, content_type

    try:
        with Image.open(io.BytesIO(data)) as image:
            out = io.BytesIO()
            image.convert("RGB").save(out, format="JPEG", quality=JPEG_QUALITY)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        logger.warning(f"HEIC conversion failed: {e}")
        raise UploadError("Could not convert this photo, try a JPEG or PNG")

    logger.info(f"Converted HEIC image ({len(data)} bytes) to JPEG")
    return out.getvalue(), "image/jpeg"

# core/images.py

import io
from typing import Tuple
from PIL import Image, UnidentifiedImageError
from .errors import FormValidationError

ACCEPTED_MIME_TYPES = ("image/png", "image/jpeg", "image/webp")


def to_jpeg(image_data: bytes, quality: int = 90) -> bytes:
    """Re-encodes any readable image (e.g. a camera frame) as a JPEG still."""
    try:
        image = Image.open(io.BytesIO(image_data))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise FormValidationError("That file is not a readable image.") from e

    # JPEG has no alpha channel
    if image.mode != "RGB":
        image = image.convert("RGB")
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=quality)
    return buffer.getvalue()


def prepare_image(image_data: bytes, mime_type: str) -> Tuple[bytes, str]:
    """Passes accepted formats through unchanged and converts anything else to JPEG."""
    if mime_type in ACCEPTED_MIME_TYPES:
        return image_data, mime_type
    return to_jpeg(image_data), "image/jpeg"

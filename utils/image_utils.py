"""
Image utilities for the inspection report generator.
Handles decoding image payloads, reading intrinsic size, and validation.
"""

import io
from typing import Tuple, Optional, List

from PIL import Image, UnidentifiedImageError

from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="IMAGE_UTILS")


def load_image(data: bytes) -> Image.Image:
    """
    Decode image bytes into a PIL image.

    Args:
        data: Raw image bytes (JPEG or PNG)

    Returns:
        PIL Image object

    Raises:
        ValueError: If the bytes cannot be decoded
    """
    if not data:
        raise ValueError("Image payload is empty")

    try:
        img = Image.open(io.BytesIO(data))
        img.load()  # Force load to catch corrupt images
        logger.debug(f"Decoded image: size={img.size}, mode={img.mode}, format={img.format}")
        return img
    except (UnidentifiedImageError, OSError, SyntaxError, Image.DecompressionBombError) as e:
        raise ValueError(f"Failed to decode image: {e}") from e


def read_image_size(data: bytes) -> Tuple[int, int]:
    """
    Decode image bytes and return intrinsic pixel size.

    Args:
        data: Raw image bytes

    Returns:
        Tuple of (width, height) in pixels

    Raises:
        ValueError: If the image cannot be decoded or has no area
    """
    img = load_image(data)
    width, height = img.size
    if width <= 0 or height <= 0:
        raise ValueError(f"Image has invalid dimensions: {width}x{height}")
    return width, height


def detect_image_format(data: bytes) -> Optional[str]:
    """
    Return the PIL format name (e.g. 'JPEG', 'PNG') or None if unknown.

    Raises:
        Image.DecompressionBombError: If the declared pixel count is over
            Pillow's safety limit
    """
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as img:
            return img.format
    except (UnidentifiedImageError, OSError):
        return None


def validate_image(
    data: bytes,
    allowed_formats: List[str] = None,
    max_size_mb: float = None
) -> Tuple[bool, Optional[str]]:
    """
    Validate an uploaded image payload.

    Args:
        data: Raw image bytes
        allowed_formats: List of allowed PIL format names
        max_size_mb: Maximum payload size in MB

    Returns:
        Tuple of (is_valid, error_message)
    """
    allowed_formats = allowed_formats or config.allowed_image_formats_list
    max_size_mb = max_size_mb or config.max_file_size_mb

    if not data:
        return False, "Please select an image for the defect."

    size_mb = len(data) / (1024 * 1024)
    if size_mb > max_size_mb:
        return False, f"File too large: {size_mb:.1f}MB (max: {max_size_mb}MB)"

    try:
        fmt = detect_image_format(data)
    except Image.DecompressionBombError as e:
        return False, f"Image is too large to decode: {e}"
    if fmt not in allowed_formats:
        return False, "Please select a JPEG or PNG image file."

    try:
        read_image_size(data)
    except ValueError as e:
        return False, str(e)

    return True, None

"""
File handling service for the inspection report generator.
Reads defect photos from disk and saves generated reports.
"""

from pathlib import Path
from typing import Optional, Tuple

from PIL import Image

from src.schemas.models import GenerationResult, ImagePayload
from utils.config import REPORT_DIR
from utils.image_utils import detect_image_format, validate_image
from utils.logger import setup_logger

logger = setup_logger(__name__, component="FILE_HANDLER")


def validate_image_upload(data: bytes, filename: Optional[str] = None) -> Tuple[bool, str]:
    """
    Validate an uploaded defect photo.

    Returns:
        Tuple of (is_valid, error_message)
    """
    is_valid, error = validate_image(data)
    if not is_valid:
        logger.warning(f"Rejected image {filename or '<upload>'}: {error}")
        return False, error
    return True, ""


def load_image_file(path: Path) -> ImagePayload:
    """
    Read an image file into a payload, detecting its format.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    data = path.read_bytes()
    try:
        fmt = detect_image_format(data)
    except Image.DecompressionBombError:
        # validate_image_upload rejects it with a readable message
        fmt = None
    if fmt not in ("JPEG", "PNG"):
        fmt = "JPEG"
    logger.debug(f"Loaded image file {path.name} ({len(data)} bytes, {fmt})")
    return ImagePayload(data=data, format=fmt, filename=path.name)


def save_report(result: GenerationResult, directory: Optional[Path] = None) -> Optional[Path]:
    """
    Write a successful generation result to ``directory``.

    Args:
        result: Result returned by report generation
        directory: Target directory (defaults to the configured report dir)

    Returns:
        Path to the saved PDF, or None if there was nothing to save
    """
    if not result.success or not result.content:
        logger.error(f"Nothing to save: {result.status_message}")
        return None

    directory = directory or REPORT_DIR
    directory.mkdir(parents=True, exist_ok=True)
    filepath = directory / result.filename

    with open(filepath, "wb") as f:
        f.write(result.content)

    logger.info(f"Saved report: {filepath}")
    return filepath

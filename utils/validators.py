"""
Input validators for the inspection report generator.
Provides validation functions for defect form inputs.
"""

from pathlib import Path
from typing import Optional, Tuple

from utils.config import config

# Form value that switches the defect type over to free text
OTHER_DEFECT_TYPE = "Other"


def validate_defect_type(
    selected: Optional[str],
    custom: Optional[str] = None
) -> Tuple[bool, Optional[str], str]:
    """
    Resolve and validate the defect type chosen on the form.

    Args:
        selected: Value of the defect type selector
        custom: Free-text type, used when ``selected`` is "Other"

    Returns:
        Tuple of (is_valid, error_message, resolved_type)
    """
    selected = (selected or "").strip()
    if selected == OTHER_DEFECT_TYPE:
        resolved = (custom or "").strip()
    else:
        resolved = selected

    if not resolved:
        return False, "Please select or enter a defect type.", ""

    return True, None, resolved


def validate_description(value: Optional[str]) -> Tuple[bool, Optional[str], str]:
    """
    Validate defect description.

    Returns:
        Tuple of (is_valid, error_message, normalized_value)
    """
    normalized = (value or "").strip()
    if not normalized:
        return False, "Please enter a description for the defect.", ""
    return True, None, normalized


def validate_image_path(path: str) -> Tuple[bool, Optional[str], Optional[Path]]:
    """
    Validate an image file path referenced by a report job.

    Args:
        path: Path string

    Returns:
        Tuple of (is_valid, error_message, Path object)
    """
    image_path = Path(path)

    if not image_path.exists():
        return False, f"File not found: {path}", None

    if not image_path.is_file():
        return False, f"Not a file: {path}", None

    ext = image_path.suffix.lower().lstrip(".")
    if ext not in ("jpg", "jpeg", "png"):
        return False, f"Invalid extension '{ext}'. Allowed: jpg, jpeg, png", None

    size_mb = image_path.stat().st_size / (1024 * 1024)
    if size_mb > config.max_file_size_mb:
        return False, f"File too large: {size_mb:.1f}MB (max: {config.max_file_size_mb}MB)", None

    return True, None, image_path

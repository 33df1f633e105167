"""
Utility modules for the inspection report generator.
"""

from utils.config import config, REPORT_DIR, LOG_DIR
from utils.logger import setup_logger
from utils.image_utils import (
    load_image,
    read_image_size,
    detect_image_format,
    validate_image,
)
from utils.validators import (
    OTHER_DEFECT_TYPE,
    validate_defect_type,
    validate_description,
    validate_image_path,
)

__all__ = [
    "config",
    "REPORT_DIR",
    "LOG_DIR",
    "setup_logger",
    "load_image",
    "read_image_size",
    "detect_image_format",
    "validate_image",
    "OTHER_DEFECT_TYPE",
    "validate_defect_type",
    "validate_description",
    "validate_image_path",
]

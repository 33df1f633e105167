"""
Services for the inspection report generator.
"""

from app.services.file_handler import load_image_file, save_report, validate_image_upload
from app.services.session_manager import DefectSession

__all__ = [
    "DefectSession",
    "load_image_file",
    "save_report",
    "validate_image_upload",
]

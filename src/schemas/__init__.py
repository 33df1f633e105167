"""
Pydantic schemas for the inspection report generator.
"""

from src.schemas.models import (
    ReportMetadata,
    ImagePayload,
    DefectRecord,
    GenerationResult,
)

__all__ = [
    "ReportMetadata",
    "ImagePayload",
    "DefectRecord",
    "GenerationResult",
]

"""
Defect session management for the inspection report generator.
Holds the caller-owned defect list and guards the generate trigger.
"""

from datetime import datetime
from typing import Callable, List, Optional

from src.errors import DefectValidationError, GenerationInProgressError
from src.layout.primitives import LayoutSettings
from src.reporting.pdf_generator import generate_report
from src.schemas.models import DefectRecord, GenerationResult, ImagePayload, ReportMetadata
from utils.logger import setup_logger
from utils.validators import validate_defect_type, validate_description

from app.services.file_handler import validate_image_upload

logger = setup_logger(__name__, component="SESSION")


class DefectSession:
    """
    Ordered defect list for one form session.

    Ids are assigned from a counter that only grows, so a removed defect's
    id is never handed out again.
    """

    def __init__(self):
        self._defects: List[DefectRecord] = []
        self._counter = 0
        self._generating = False

    @property
    def defects(self) -> List[DefectRecord]:
        """Snapshot of the current defects, in insertion order."""
        return list(self._defects)

    @property
    def is_generating(self) -> bool:
        return self._generating

    def __len__(self) -> int:
        return len(self._defects)

    def add_defect(
        self,
        defect_type: Optional[str],
        image: ImagePayload,
        description: Optional[str],
        custom_type: Optional[str] = None,
    ) -> DefectRecord:
        """
        Validate form input and append a new defect.

        Raises:
            DefectValidationError: With the message to show the user
        """
        ok, error, resolved_type = validate_defect_type(defect_type, custom_type)
        if not ok:
            raise DefectValidationError(error)

        ok, error = validate_image_upload(image.data, image.filename)
        if not ok:
            raise DefectValidationError(error)

        ok, error, resolved_description = validate_description(description)
        if not ok:
            raise DefectValidationError(error)

        self._counter += 1
        record = DefectRecord(
            defect_id=self._counter,
            defect_type=resolved_type,
            image=image,
            description=resolved_description,
        )
        self._defects.append(record)
        logger.info(f"Added defect #{record.defect_id}: {resolved_type}")
        return record

    def remove_defect(self, defect_id: int) -> bool:
        """Remove a defect by id. Returns False if no such defect exists."""
        before = len(self._defects)
        self._defects = [d for d in self._defects if d.defect_id != defect_id]
        removed = len(self._defects) < before
        if removed:
            logger.info(f"Removed defect #{defect_id}")
        return removed

    def clear(self) -> None:
        """Drop all defects. The id counter keeps counting."""
        self._defects = []

    def generate(
        self,
        metadata: ReportMetadata,
        settings: Optional[LayoutSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> GenerationResult:
        """
        Run report generation over the current defects.

        The trigger is disabled for the duration of the run.

        Raises:
            GenerationInProgressError: If a run is already in progress
        """
        if self._generating:
            raise GenerationInProgressError("A report is already being generated")

        self._generating = True
        try:
            result = generate_report(metadata, self.defects, settings=settings, clock=clock)
        finally:
            self._generating = False

        if result.success:
            logger.info(result.status_message)
        else:
            logger.error(result.status_message)
        return result

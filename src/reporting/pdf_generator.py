"""
Inspection report generation entry points.

Turns report metadata and an ordered defect list into a finished,
paginated PDF and its download file name.
"""

import asyncio
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, List, Optional, Sequence

from src.errors import ReportGenerationError
from src.layout.primitives import LayoutSettings, Page
from src.reporting.composer import ReportComposer
from src.reporting.finalizer import PaginationFinalizer, PdfRenderer
from src.schemas.models import DefectRecord, GenerationResult, ReportMetadata
from utils.config import config, LOG_DIR
from utils.logger import setup_logger, report_run

logger = setup_logger(
    __name__,
    level=config.log_level,
    log_file=LOG_DIR / "reports.log" if config.log_to_file else None,
    component="REPORTS",
)


@dataclass
class RenderedReport:
    """A complete generated document."""
    content: bytes
    filename: str
    timestamp: str
    pages: List[Page]

    @property
    def page_count(self) -> int:
        return len(self.pages)


class InspectionReport:
    """Inspection report generator. Holds no state between runs."""

    def __init__(
        self,
        settings: Optional[LayoutSettings] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.settings = settings or LayoutSettings.from_config()
        self.clock = clock
        self.logger = logger

    async def generate(
        self,
        metadata: ReportMetadata,
        defects: Sequence[DefectRecord],
    ) -> RenderedReport:
        """
        Generate the PDF report.

        Args:
            metadata: Report header fields
            defects: Defects in the order they should appear

        Returns:
            The rendered report

        Raises:
            ReportGenerationError: If composition or rendering fails. Nothing
                is produced in that case.
        """
        with report_run() as run_id:
            return await self._run(metadata, list(defects), run_id)

    async def _run(
        self,
        metadata: ReportMetadata,
        defects: List[DefectRecord],
        run_id: str,
    ) -> RenderedReport:
        self.logger.info(f"Generating PDF report ({len(defects)} defect(s), run {run_id})...")

        try:
            composer = ReportComposer(metadata, self.settings)
            pages = await composer.compose(defects)

            finished = PaginationFinalizer(self.settings).finalize(pages, self.clock())

            content = PdfRenderer(self.settings).render(
                finished,
                title=metadata.report_title or self.settings.default_report_title,
                author=metadata.company_name or self.settings.default_company_name,
            )
        except Exception as e:
            self.logger.error(f"PDF generation failed: {e}")
            raise ReportGenerationError(str(e) or e.__class__.__name__) from e

        self.logger.info(f"PDF report generated: {finished.filename} ({finished.page_count} pages)")

        return RenderedReport(
            content=content,
            filename=finished.filename,
            timestamp=finished.timestamp,
            pages=finished.pages,
        )


# ============================================================================
# CONVENIENCE FUNCTION
# ============================================================================

def generate_report(
    metadata: ReportMetadata,
    defects: Sequence[DefectRecord],
    settings: Optional[LayoutSettings] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> GenerationResult:
    """
    Generate an inspection report from synchronous code.

    Never raises for generation failures; the error is reported in the
    returned result instead. Must not be called from a running event loop.
    """
    reporter = InspectionReport(settings=settings, clock=clock)
    try:
        rendered = asyncio.run(reporter.generate(metadata, defects))
    except ReportGenerationError as e:
        return GenerationResult(success=False, error=str(e))

    return GenerationResult(
        success=True,
        filename=rendered.filename,
        content=rendered.content,
        page_count=rendered.page_count,
    )

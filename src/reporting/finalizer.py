"""
Pagination finalizer and PDF renderer.

Footers are stamped only after every page exists, so "Page i of N" always
knows N. The renderer then replays each page's draw operations onto a
reportlab canvas.
"""

import io
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional

from reportlab.lib.colors import black
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from src.layout.primitives import (
    LayoutSettings, Page, Footer, TextRun, FilledRect, Rule, PlacedImage,
    FOOTER_TEXT, FONT_REGULAR,
)
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="FINALIZER")

FOOTER_FONT_SIZE = 8


def report_filename(day: date) -> str:
    """Download name for a report generated on ``day``."""
    return f"Inspection_Report_{day:%Y-%m-%d}.pdf"


def format_timestamp(moment: datetime) -> str:
    """Render e.g. '3/15/2024, 2:05:09 PM'."""
    hour = moment.hour % 12 or 12
    suffix = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment.minute:02d}:{moment.second:02d} {suffix}"
    )


@dataclass
class FinishedReport:
    """Stamped pages plus the derived file name."""
    pages: List[Page]
    filename: str
    timestamp: str
    generated_at: datetime

    @property
    def page_count(self) -> int:
        return len(self.pages)


class PaginationFinalizer:
    """Stamps page-number and timestamp footers on every page."""

    def __init__(self, settings: LayoutSettings):
        self.settings = settings

    def finalize(self, pages: List[Page], generated_at: datetime) -> FinishedReport:
        # One timestamp for the whole document
        timestamp = format_timestamp(generated_at)
        total = len(pages)
        center = self.settings.page_width / 2
        height = self.settings.page_height

        for number, page in enumerate(pages, 1):
            page.stamp(Footer(
                page_label=TextRun(
                    f"Page {number} of {total}", center, height - 10,
                    FONT_REGULAR, FOOTER_FONT_SIZE, FOOTER_TEXT, "center",
                ),
                timestamp_label=TextRun(
                    f"Report generated: {timestamp}", center, height - 6,
                    FONT_REGULAR, FOOTER_FONT_SIZE, FOOTER_TEXT, "center",
                ),
            ))

        logger.debug(f"Stamped footers on {total} page(s)")
        return FinishedReport(
            pages=pages,
            filename=report_filename(generated_at.date()),
            timestamp=timestamp,
            generated_at=generated_at,
        )


class PdfRenderer:
    """Writes finished pages to PDF bytes with reportlab."""

    def __init__(self, settings: LayoutSettings):
        self.settings = settings
        self.page_size = (settings.page_width * mm, settings.page_height * mm)

    def render(
        self,
        report: FinishedReport,
        title: Optional[str] = None,
        author: Optional[str] = None,
    ) -> bytes:
        buffer = io.BytesIO()
        # invariant=1 keeps output byte-identical for identical input
        pdf = canvas.Canvas(buffer, pagesize=self.page_size, invariant=1)
        if title:
            pdf.setTitle(title)
        if author:
            pdf.setAuthor(author)

        for page in report.pages:
            for op in page.operations:
                self._draw(pdf, op)
            if page.footer is not None:
                self._draw(pdf, page.footer.page_label)
                self._draw(pdf, page.footer.timestamp_label)
            pdf.showPage()

        pdf.save()
        return buffer.getvalue()

    def _y(self, y: float) -> float:
        """Top-down millimetres to reportlab's bottom-up points."""
        return self.page_size[1] - y * mm

    def _draw(self, pdf: canvas.Canvas, op) -> None:
        if isinstance(op, TextRun):
            pdf.setFont(op.font_name, op.font_size)
            pdf.setFillColor(op.color if op.color is not None else black)
            if op.align == "center":
                pdf.drawCentredString(op.x * mm, self._y(op.y), op.text)
            else:
                pdf.drawString(op.x * mm, self._y(op.y), op.text)
        elif isinstance(op, FilledRect):
            pdf.setFillColor(op.color)
            pdf.rect(op.x * mm, self._y(op.y + op.height), op.width * mm, op.height * mm,
                     stroke=0, fill=1)
        elif isinstance(op, Rule):
            pdf.setStrokeColor(op.color)
            pdf.setLineWidth(op.line_width * mm)
            pdf.line(op.x1 * mm, self._y(op.y1), op.x2 * mm, self._y(op.y2))
        elif isinstance(op, PlacedImage):
            pdf.drawImage(
                ImageReader(io.BytesIO(op.data)),
                op.x * mm,
                self._y(op.y + op.height),
                width=op.width * mm,
                height=op.height * mm,
                mask="auto",
            )
        else:
            raise TypeError(f"Unknown draw operation: {type(op).__name__}")

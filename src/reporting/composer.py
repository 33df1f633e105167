"""
Section composer: lays out the fixed report sections, in order, onto pages.
"""

from datetime import datetime
from typing import Dict, List, Optional, Sequence

from src.layout.images import ImagePlacementResolver, Placement
from src.layout.primitives import (
    LayoutSettings, Page, PageCursor, TextRun, FilledRect,
    ROW_SHADE, RULE_COLOR, SEPARATOR_COLOR, MUTED_TEXT, font_name,
)
from src.layout.text_flow import TextFlow, wrap_text
from src.schemas.models import DefectRecord, ReportMetadata
from utils.config import config
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="COMPOSER")


# ============================================================================
# SECTION TITLES
# ============================================================================

SECTION_CLIENT = "Property & Client Details"
SECTION_INSPECTION = "Inspection Details"
SECTION_DISCLAIMER = "General Disclaimer"

NOT_AVAILABLE = "N/A"
CONTACT_SEPARATOR = " | "


def defects_section_title(count: int) -> str:
    return f"Identified Defects ({count} Total)"


def defect_heading(number: int, defect: DefectRecord) -> str:
    return f"Defect #{number}: {defect.defect_type}"


def format_inspection_date(value: str) -> str:
    """Render an ISO date as e.g. 'March 15, 2024'; other input is returned as-is."""
    try:
        day = datetime.strptime(value.strip(), "%Y-%m-%d")
    except ValueError:
        return value
    return f"{day:%B} {day.day}, {day.year}"


class ReportComposer:
    """
    Composes one report. Create a new instance per generation run.

    Attributes:
        section_pages: Page index on which each section header was drawn
        defect_pages: Page index of each defect heading, in input order
        placements: Image placement per defect (None for placeholders)
    """

    # Label/value rows in the client details block
    VALUE_OFFSET = 35
    VALUE_WRAP_INSET = 40
    WRAPPED_LINE_SPACING = 5
    ROW_ADVANCE = 6

    TABLE_ROW_HEIGHT = 8
    DESCRIPTION_SPACE_AFTER = 10
    SEPARATOR_RESERVE = 15

    def __init__(self, metadata: ReportMetadata, settings: Optional[LayoutSettings] = None):
        self.metadata = metadata
        self.settings = settings or LayoutSettings.from_config()
        self.cursor = PageCursor(self.settings)
        self.text = TextFlow(self.cursor)
        self.images = ImagePlacementResolver(self.cursor)
        self.logger = logger

        self.section_pages: Dict[str, int] = {}
        self.defect_pages: List[int] = []
        self.placements: List[Optional[Placement]] = []

    @property
    def pages(self) -> List[Page]:
        return self.cursor.pages

    async def compose(self, defects: Sequence[DefectRecord]) -> List[Page]:
        """
        Lay out every section and return the pages in creation order.

        Defects are processed strictly one after another; each image probe
        completes before the next defect is touched.
        """
        self._build_branding()
        self._build_client_details()
        self._build_inspection_details()
        self._build_disclaimer()
        await self._build_defects(defects)

        self.logger.info(f"Composed {len(self.pages)} page(s) with {len(defects)} defect(s)")
        return self.pages

    def _section(self, title: str) -> None:
        self.text.section_header(title)
        self.section_pages[title] = self.cursor.page_index

    # ------------------------------------------------------------------
    # Sections
    # ------------------------------------------------------------------

    def _build_branding(self) -> None:
        """Company name, contact line, report title and a rule."""
        meta = self.metadata
        company = meta.company_name or self.settings.default_company_name
        title = meta.report_title or self.settings.default_report_title

        self.text.centered_text(company, font_size=20, bold=True)
        self.cursor.advance(10)

        contact = [v for v in (meta.company_phone, meta.company_email) if v]
        if contact:
            self.text.centered_text(CONTACT_SEPARATOR.join(contact), font_size=10)
            self.cursor.advance(8)

        self.text.centered_text(title, font_size=16, bold=True, offset=5)
        self.cursor.advance(15)

        self.text.rule(RULE_COLOR, 0.5)

    def _label_value(self, label: str, value: str, wrap: bool = False) -> None:
        s = self.settings
        if not wrap:
            self.cursor.ensure_space(self.ROW_ADVANCE)
            y = self.cursor.y
            self.cursor.draw(TextRun(label, s.margin, y, font_name(True), 10))
            self.cursor.draw(TextRun(value, s.margin + self.VALUE_OFFSET, y, font_name(False), 10))
            self.cursor.advance(self.ROW_ADVANCE)
            return

        # Label goes with the first line; long values flow onto following pages
        lines = wrap_text(value, s.content_width - self.VALUE_WRAP_INSET, 10)
        for i, line in enumerate(lines):
            self.cursor.ensure_space(self.WRAPPED_LINE_SPACING)
            y = self.cursor.y
            if i == 0:
                self.cursor.draw(TextRun(label, s.margin, y, font_name(True), 10))
            self.cursor.draw(TextRun(line, s.margin + self.VALUE_OFFSET, y, font_name(False), 10))
            self.cursor.advance(self.WRAPPED_LINE_SPACING)
        self.cursor.advance(2)

    def _build_client_details(self) -> None:
        meta = self.metadata
        self._section(SECTION_CLIENT)

        if meta.client_name:
            self._label_value("Client Name:", meta.client_name)
        if meta.client_address:
            self._label_value("Property Address:", meta.client_address, wrap=True)
        if meta.inspection_date:
            self._label_value("Inspection Date:", format_inspection_date(meta.inspection_date))
        if meta.inspector_name:
            self._label_value("Inspector:", meta.inspector_name)
        if meta.inspector_credentials:
            self._label_value("Credentials:", meta.inspector_credentials, wrap=True)

        self.cursor.advance(5)

    def _build_inspection_details(self) -> None:
        """Four-row key/value table; rows 1 and 3 are shaded."""
        meta = self.metadata
        s = self.settings
        self._section(SECTION_INSPECTION)

        rows = [
            ("Attendance", meta.attendance),
            ("Occupancy", meta.occupancy),
            ("Type of Building", meta.building_type),
            ("Weather Condition", meta.weather_condition),
        ]
        col_width = s.content_width / 2

        for index, (key, value) in enumerate(rows):
            self.cursor.ensure_space(self.TABLE_ROW_HEIGHT)
            y = self.cursor.y
            if index % 2 == 0:
                self.cursor.draw(FilledRect(
                    s.margin, y - 4, s.content_width, self.TABLE_ROW_HEIGHT, ROW_SHADE
                ))
            self.cursor.draw(TextRun(key, s.margin + 2, y, font_name(True), 10))
            self.cursor.draw(TextRun(value or NOT_AVAILABLE, s.margin + col_width, y, font_name(False), 10))
            self.cursor.advance(self.TABLE_ROW_HEIGHT)

        self.cursor.advance(5)

    def _build_disclaimer(self) -> None:
        self._section(SECTION_DISCLAIMER)
        if self.metadata.disclaimer:
            self.text.add_text(self.metadata.disclaimer, font_size=9, color=MUTED_TEXT, space_after=0)
        self.cursor.advance(5)

    async def _build_defects(self, defects: Sequence[DefectRecord]) -> None:
        if not defects:
            return

        # Defects always open on a fresh page
        self.cursor.new_page()
        self._section(defects_section_title(len(defects)))

        for number, defect in enumerate(defects, 1):
            self.cursor.ensure_space(self.settings.defect_block_reserve)

            heading = defect_heading(number, defect)
            self.images.write_heading(heading)
            self.defect_pages.append(self.cursor.page_index)

            placement = await self.images.place(defect.image, heading)
            self.placements.append(placement)

            self.text.add_text(defect.description, font_size=10, space_after=self.DESCRIPTION_SPACE_AFTER)

            if number < len(defects):
                self.cursor.ensure_space(self.SEPARATOR_RESERVE)
                self.text.rule(SEPARATOR_COLOR, 0.3, space_after=10)

            self.logger.debug(f"Laid out defect #{number} (id={defect.defect_id})")

"""
Page geometry, draw operations and the vertical cursor.

All coordinates are millimetres measured from the top-left corner of the
page; text ``y`` values are baselines.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union

from reportlab.lib.colors import Color, HexColor, black

from utils.config import Config, config as default_config


# ============================================================================
# COLORS
# ============================================================================

TEXT_DEFAULT = black
HEADER_FILL = HexColor("#f0f0f0")       # Section banner
HEADER_TEXT = HexColor("#1e1e1e")
ROW_SHADE = HexColor("#f8f8f8")         # Alternating table rows
RULE_COLOR = HexColor("#c8c8c8")        # Branding rule
SEPARATOR_COLOR = HexColor("#dcdcdc")   # Between defects
MUTED_TEXT = HexColor("#505050")        # Disclaimer
DEFECT_ACCENT = HexColor("#2c5282")     # Defect headings
ERROR_TEXT = HexColor("#960000")        # Image placeholder
FOOTER_TEXT = HexColor("#969696")

FONT_REGULAR = "Helvetica"
FONT_BOLD = "Helvetica-Bold"


def font_name(bold: bool) -> str:
    return FONT_BOLD if bold else FONT_REGULAR


# ============================================================================
# SETTINGS
# ============================================================================

@dataclass(frozen=True)
class LayoutSettings:
    """Visual constants for one generation run."""
    page_width: float = 210.0
    page_height: float = 297.0
    margin: float = 20.0
    line_height_factor: float = 0.5
    max_image_height: float = 80.0
    image_heading_reserve: float = 20.0
    defect_block_reserve: float = 100.0
    image_probe_timeout: float = 10.0
    default_company_name: str = "Inspection Company"
    default_report_title: str = "Home Defect Inspection Report"

    @classmethod
    def from_config(cls, cfg: Optional[Config] = None) -> "LayoutSettings":
        cfg = cfg or default_config
        return cls(
            page_width=cfg.page_width_mm,
            page_height=cfg.page_height_mm,
            margin=cfg.page_margin_mm,
            line_height_factor=cfg.line_height_factor,
            max_image_height=cfg.max_image_height_mm,
            image_heading_reserve=cfg.image_heading_reserve_mm,
            defect_block_reserve=cfg.defect_block_reserve_mm,
            image_probe_timeout=cfg.image_probe_timeout,
            default_company_name=cfg.default_company_name,
            default_report_title=cfg.default_report_title,
        )

    @property
    def content_width(self) -> float:
        return self.page_width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        """Lowest y any content may reach."""
        return self.page_height - self.margin


# ============================================================================
# DRAW OPERATIONS
# ============================================================================

@dataclass
class TextRun:
    """Single line of text. ``align='center'`` centres it on ``x``."""
    text: str
    x: float
    y: float
    font_name: str = FONT_REGULAR
    font_size: float = 10
    color: Optional[Color] = None  # None draws in TEXT_DEFAULT
    align: str = "left"


@dataclass
class FilledRect:
    x: float
    y: float
    width: float
    height: float
    color: Color


@dataclass
class Rule:
    x1: float
    y1: float
    x2: float
    y2: float
    color: Color
    line_width: float


@dataclass
class PlacedImage:
    """Image drawn with its top-left corner at (x, y)."""
    data: bytes = field(repr=False)
    x: float
    y: float
    width: float
    height: float


DrawOp = Union[TextRun, FilledRect, Rule, PlacedImage]


@dataclass
class Footer:
    page_label: TextRun
    timestamp_label: TextRun


@dataclass
class Page:
    """Append-only list of draw operations for one page."""
    index: int
    operations: List[DrawOp] = field(default_factory=list)
    footer: Optional[Footer] = None

    def add(self, op: DrawOp) -> DrawOp:
        self.operations.append(op)
        return op

    def stamp(self, footer: Footer) -> None:
        if self.footer is not None:
            raise ValueError(f"Page {self.index + 1} already carries a footer")
        self.footer = footer

    @property
    def texts(self) -> List[str]:
        """Text of every run on the page, footer included, in draw order."""
        result = [op.text for op in self.operations if isinstance(op, TextRun)]
        if self.footer is not None:
            result.extend([self.footer.page_label.text, self.footer.timestamp_label.text])
        return result


# ============================================================================
# CURSOR
# ============================================================================

class PageCursor:
    """
    Vertical write position over a growing list of pages.

    Owned by exactly one generation run.
    """

    def __init__(self, settings: LayoutSettings):
        self.settings = settings
        self.pages: List[Page] = []
        self.y = settings.margin
        self.new_page()

    @property
    def page(self) -> Page:
        return self.pages[-1]

    @property
    def page_index(self) -> int:
        return len(self.pages) - 1

    def new_page(self) -> Page:
        page = Page(index=len(self.pages))
        self.pages.append(page)
        self.y = self.settings.margin
        return page

    def ensure_space(self, required_height: float) -> bool:
        """
        Break to a new page if ``required_height`` does not fit below the cursor.

        Returns:
            True if a page break occurred
        """
        if self.y + required_height > self.settings.bottom_limit:
            self.new_page()
            return True
        return False

    def advance(self, dy: float) -> None:
        # y never leaves [margin, bottom_limit]
        self.y = min(self.y + dy, self.settings.bottom_limit)

    def draw(self, op: DrawOp) -> DrawOp:
        return self.page.add(op)

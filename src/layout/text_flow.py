"""
Text flow: wrapping strings to a width and writing them line by line,
breaking pages between lines when needed.
"""

from typing import List, Optional

from reportlab.lib.colors import Color
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

from src.layout.primitives import (
    PageCursor, TextRun, FilledRect, Rule,
    HEADER_FILL, HEADER_TEXT, font_name,
)


def wrap_text(content: str, width: float, font_size: float, bold: bool = False) -> List[str]:
    """
    Split ``content`` into lines no wider than ``width`` millimetres.

    Measured with the Helvetica metrics the PDF is drawn with. Explicit
    newlines always start a new line.
    """
    if not content:
        return []
    return simpleSplit(content, font_name(bold), font_size, width * mm)


class TextFlow:
    """Writes text blocks through a :class:`PageCursor`."""

    # Banner geometry for section headers
    HEADER_RESERVE = 20
    HEADER_BANNER_HEIGHT = 10
    HEADER_FONT_SIZE = 12

    def __init__(self, cursor: PageCursor):
        self.cursor = cursor
        self.settings = cursor.settings

    def line_height(self, font_size: float) -> float:
        return font_size * self.settings.line_height_factor

    def add_text(
        self,
        content: str,
        font_size: float = 10,
        bold: bool = False,
        color: Optional[Color] = None,
        space_after: float = 2,
    ) -> List[str]:
        """
        Write wrapped ``content`` at the left margin.

        Each line reserves ``line_height + 2`` before it is written, so a
        block may continue on the next page between any two lines.

        Returns:
            The wrapped lines, in the order written
        """
        lines = wrap_text(content, self.settings.content_width, font_size, bold)
        line_height = self.line_height(font_size)

        for line in lines:
            self.cursor.ensure_space(line_height + 2)
            self.cursor.draw(TextRun(
                text=line,
                x=self.settings.margin,
                y=self.cursor.y,
                font_name=font_name(bold),
                font_size=font_size,
                color=color,
            ))
            self.cursor.advance(line_height)

        self.cursor.advance(space_after)
        return lines

    def section_header(self, title: str) -> None:
        """Shaded full-width banner with a bold title. Titles are not wrapped."""
        s = self.settings
        self.cursor.ensure_space(self.HEADER_RESERVE)
        self.cursor.advance(5)
        y = self.cursor.y
        self.cursor.draw(FilledRect(
            x=s.margin,
            y=y - 5,
            width=s.content_width,
            height=self.HEADER_BANNER_HEIGHT,
            color=HEADER_FILL,
        ))
        self.cursor.draw(TextRun(
            text=title,
            x=s.margin + 3,
            y=y + 2,
            font_name=font_name(True),
            font_size=self.HEADER_FONT_SIZE,
            color=HEADER_TEXT,
        ))
        self.cursor.advance(12)

    def centered_text(self, text: str, font_size: float, bold: bool = False, offset: float = 0) -> None:
        """Draw ``text`` centred on the page at the cursor (plus ``offset``). Does not advance."""
        self.cursor.draw(TextRun(
            text=text,
            x=self.settings.page_width / 2,
            y=self.cursor.y + offset,
            font_name=font_name(bold),
            font_size=font_size,
            align="center",
        ))

    def rule(self, color: Color, line_width: float, space_after: float = 5) -> None:
        """Horizontal rule across the content width at the cursor."""
        s = self.settings
        y = self.cursor.y
        self.cursor.draw(Rule(
            x1=s.margin, y1=y,
            x2=s.page_width - s.margin, y2=y,
            color=color,
            line_width=line_width,
        ))
        self.cursor.advance(space_after)

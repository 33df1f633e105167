"""
Layout engine: cursor bookkeeping, text flow and image placement.
"""

from src.layout.primitives import (
    LayoutSettings,
    Page,
    PageCursor,
    TextRun,
    FilledRect,
    Rule,
    PlacedImage,
    Footer,
)
from src.layout.text_flow import TextFlow, wrap_text
from src.layout.images import (
    ImagePlacementResolver,
    ImageSize,
    Placement,
    probe_image_size,
    fit_to_box,
    IMAGE_ERROR_NOTICE,
)

__all__ = [
    "LayoutSettings",
    "Page",
    "PageCursor",
    "TextRun",
    "FilledRect",
    "Rule",
    "PlacedImage",
    "Footer",
    "TextFlow",
    "wrap_text",
    "ImagePlacementResolver",
    "ImageSize",
    "Placement",
    "probe_image_size",
    "fit_to_box",
    "IMAGE_ERROR_NOTICE",
]

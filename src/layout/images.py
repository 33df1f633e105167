"""
Image placement: discover intrinsic size, scale into a bounding box and
place the image so that it stays on the same page as its heading.
"""

import asyncio
import contextvars
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from PIL import Image

from src.layout.primitives import (
    PageCursor, TextRun, PlacedImage,
    DEFECT_ACCENT, ERROR_TEXT, font_name,
)
from src.errors import ImageDecodeError
from src.schemas.models import ImagePayload
from utils.config import config
from utils.image_utils import read_image_size
from utils.logger import setup_logger

logger = setup_logger(__name__, level=config.log_level, component="IMAGES")

IMAGE_ERROR_NOTICE = "[Image could not be loaded]"
CONTINUED_SUFFIX = " (continued)"


@dataclass(frozen=True)
class ImageSize:
    """Intrinsic pixel dimensions."""
    width: int
    height: int


@dataclass(frozen=True)
class Placement:
    """Resolved position and size of a placed image (millimetres)."""
    x: float
    y: float
    width: float
    height: float
    ratio: float
    page_index: int
    continued: bool = False


async def probe_image_size(data: bytes, timeout: float = 10.0) -> ImageSize:
    """
    Decode ``data`` off the event loop and return its pixel size.

    Always resolves: any decode problem, empty image or timeout surfaces
    as :class:`ImageDecodeError`. The decode runs on a private executor
    that is released without waiting, so a stuck decode never holds the
    event loop open past the timeout.
    """
    loop = asyncio.get_running_loop()
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="image-probe")
    try:
        width, height = await asyncio.wait_for(
            loop.run_in_executor(executor, contextvars.copy_context().run, read_image_size, data),
            timeout=timeout,
        )
    except asyncio.TimeoutError as e:
        raise ImageDecodeError(f"Image decode timed out after {timeout:.1f}s") from e
    except (ValueError, OSError, Image.DecompressionBombError) as e:
        raise ImageDecodeError(str(e)) from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return ImageSize(width=width, height=height)


def fit_to_box(size: ImageSize, max_width: float, max_height: float):
    """
    Scale ``size`` to fit inside ``max_width`` x ``max_height``.

    Small images are scaled up; the aspect ratio is always kept.

    Returns:
        Tuple of (width, height, ratio)
    """
    ratio = min(max_width / size.width, max_height / size.height)
    return size.width * ratio, size.height * ratio, ratio


class ImagePlacementResolver:
    """Places defect images through a :class:`PageCursor`."""

    HEADING_FONT_SIZE = 11
    HEADING_ADVANCE = 8
    ERROR_FONT_SIZE = 10
    ERROR_ADVANCE = 8
    SPACE_AFTER = 5

    def __init__(self, cursor: PageCursor):
        self.cursor = cursor
        self.settings = cursor.settings
        self.logger = logger

    def write_heading(self, heading: str) -> None:
        """Bold accent-coloured defect heading at the left margin."""
        self.cursor.draw(TextRun(
            text=heading,
            x=self.settings.margin,
            y=self.cursor.y,
            font_name=font_name(True),
            font_size=self.HEADING_FONT_SIZE,
            color=DEFECT_ACCENT,
        ))
        self.cursor.advance(self.HEADING_ADVANCE)

    def write_error_notice(self) -> None:
        self.cursor.draw(TextRun(
            text=IMAGE_ERROR_NOTICE,
            x=self.settings.margin,
            y=self.cursor.y,
            font_name=font_name(False),
            font_size=self.ERROR_FONT_SIZE,
            color=ERROR_TEXT,
        ))
        self.cursor.advance(self.ERROR_ADVANCE)

    async def place(
        self,
        image: ImagePayload,
        heading: str,
        max_width: Optional[float] = None,
        max_height: Optional[float] = None,
    ) -> Optional[Placement]:
        """
        Probe, scale and draw ``image`` below the current cursor.

        If the scaled image plus the heading reserve does not fit on the
        current page, a new page is started and ``heading`` is repeated with
        a "(continued)" suffix before the image.

        Returns:
            The placement, or None when the image could not be decoded and a
            placeholder notice was written instead
        """
        s = self.settings
        max_width = s.content_width if max_width is None else max_width
        max_height = s.max_image_height if max_height is None else max_height

        try:
            size = await probe_image_size(image.data, timeout=s.image_probe_timeout)
        except ImageDecodeError as e:
            self.logger.warning(f"Image for '{heading}' could not be loaded: {e}")
            self.write_error_notice()
            return None

        width, height, ratio = fit_to_box(size, max_width, max_height)
        self.logger.debug(
            f"Scaled {size.width}x{size.height}px to {width:.1f}x{height:.1f}mm (ratio={ratio:.4f})"
        )

        continued = False
        if self.cursor.y + height + s.image_heading_reserve > s.bottom_limit:
            self.cursor.new_page()
            self.write_heading(heading + CONTINUED_SUFFIX)
            continued = True

        placement = Placement(
            x=s.margin,
            y=self.cursor.y,
            width=width,
            height=height,
            ratio=ratio,
            page_index=self.cursor.page_index,
            continued=continued,
        )
        self.cursor.draw(PlacedImage(
            data=image.data,
            x=placement.x,
            y=placement.y,
            width=width,
            height=height,
        ))
        self.cursor.advance(height + self.SPACE_AFTER)
        return placement

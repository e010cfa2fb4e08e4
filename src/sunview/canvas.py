"""Drawing surfaces for SunView.

The view only talks to the :class:`Canvas` protocol. :class:`PillowCanvas`
implements it on top of a Pillow RGBA image so scenes can be rendered
offscreen and saved to disk.
"""

from functools import lru_cache
from typing import Optional, Protocol

from PIL import Image, ImageDraw, ImageFont

from sunview.logger import get_logger

logger = get_logger(__name__)

Font = ImageFont.FreeTypeFont


class CanvasError(Exception):
    """Exception raised for drawing surface errors."""

    pass


class Canvas(Protocol):
    """Operations the sun view needs from a drawing surface."""

    def draw_line(
        self, x0: float, y0: float, x1: float, y1: float, color: str, width: int
    ) -> None: ...

    def draw_filled_circle(self, cx: float, cy: float, radius: float, color: str) -> None: ...

    def draw_text(self, text: str, x: float, y: float, color: str, font: Font) -> None:
        """Draw left-aligned text with its baseline at ``y``."""
        ...

    def measure_text(self, text: str, font: Font) -> tuple[int, int]:
        """Return the width and height of the text's ink bounds."""
        ...

    def clip_rect(self, left: int, top: int, right: int, bottom: int) -> None:
        """Restrict later drawing to a rectangle, replacing any previous clip."""
        ...


@lru_cache(maxsize=32)
def load_font(typeface: Optional[str], size: int) -> Font:
    """Load a scalable font.

    Args:
        typeface: Path to a TrueType/OpenType font, or None for Pillow's
            built-in scalable font.
        size: Font size in pixels.

    Returns:
        Font object usable with ImageDraw.

    Raises:
        CanvasError: If the font file cannot be loaded.
    """
    if typeface is None:
        return ImageFont.load_default(size=size)
    try:
        return ImageFont.truetype(typeface, size)
    except OSError as e:
        raise CanvasError(f"Cannot load typeface {typeface}: {e}")


class PillowCanvas:
    """Canvas backed by a Pillow RGBA image."""

    def __init__(self, width: int, height: int, background: str = "#00000000"):
        """Create a blank canvas.

        Args:
            width: Image width in pixels.
            height: Image height in pixels.
            background: Fill color accepted by Pillow.
        """
        self.image = Image.new("RGBA", (max(width, 1), max(height, 1)), background)
        self._draw = ImageDraw.Draw(self.image)
        self._clip: Optional[tuple[int, int, int, int]] = None

    @property
    def clip(self) -> Optional[tuple[int, int, int, int]]:
        """Current clip box, or None when drawing is unrestricted."""
        return self._clip

    def clip_rect(self, left: int, top: int, right: int, bottom: int) -> None:
        self._clip = (int(left), int(top), int(right), int(bottom))

    def _clipped_box(self) -> Optional[tuple[int, int, int, int]]:
        """Intersect the clip with the image; None when nothing is drawable."""
        left, top, right, bottom = self._clip
        left, top = max(left, 0), max(top, 0)
        right = min(right, self.image.width)
        bottom = min(bottom, self.image.height)
        if right <= left or bottom <= top:
            return None
        return left, top, right, bottom

    def _paint(self, operation) -> None:
        """Run a drawing operation, honouring the clip box."""
        if self._clip is None:
            operation(self._draw)
            return

        box = self._clipped_box()
        if box is None:
            logger.debug(f"Clip {self._clip} is empty, skipping draw")
            return

        overlay = Image.new("RGBA", self.image.size, (0, 0, 0, 0))
        operation(ImageDraw.Draw(overlay))
        self.image.alpha_composite(overlay, dest=box[:2], source=box)

    def draw_line(
        self, x0: float, y0: float, x1: float, y1: float, color: str, width: int
    ) -> None:
        self._paint(lambda d: d.line([(x0, y0), (x1, y1)], fill=color, width=width))

    def draw_filled_circle(self, cx: float, cy: float, radius: float, color: str) -> None:
        if radius <= 0:
            return
        self._paint(
            lambda d: d.ellipse(
                [(cx - radius, cy - radius), (cx + radius, cy + radius)], fill=color
            )
        )

    def draw_text(self, text: str, x: float, y: float, color: str, font: Font) -> None:
        self._paint(lambda d: d.text((x, y), text, fill=color, font=font, anchor="ls"))

    def measure_text(self, text: str, font: Font) -> tuple[int, int]:
        left, top, right, bottom = self._draw.textbbox((0, 0), text, font=font)
        return right - left, bottom - top

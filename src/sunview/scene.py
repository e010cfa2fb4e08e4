"""Scene layout and rendering for the sun view.

Layout helpers turn normalized arc positions into pixel positions. The sun is
inset by ``2 * sun_radius`` horizontally but only by ``sun_radius`` plus the
floating label margin vertically, which keeps the whole circle inside the
viewport.
"""

from dataclasses import dataclass
from typing import Optional

from sunview.canvas import Canvas, load_font
from sunview.config import StyleConfig
from sunview.logger import get_logger
from sunview.progress import ArcPosition

logger = get_logger(__name__)

# Height of the view as a fraction of its width
ASPECT_RATIO = 0.6


@dataclass(frozen=True)
class ViewportGeometry:
    """Pixel bounds of the view."""

    width: int
    height: int
    left: int
    right: int
    bottom: int

    @classmethod
    def from_size(cls, width: int, height: int) -> "ViewportGeometry":
        """Build geometry for a view of the given size."""
        return cls(width=width, height=height, left=0, right=width, bottom=height)


@dataclass(frozen=True)
class DerivedSizing:
    """Space available to the sun's center. May go negative for tiny views."""

    available_sun_height: int
    available_sun_width: int

    @classmethod
    def compute(cls, geometry: ViewportGeometry, style: StyleConfig) -> "DerivedSizing":
        return cls(
            available_sun_height=(
                geometry.height - style.horizon_bottom_margin - style.floating_label_margin
            ),
            available_sun_width=geometry.width - (style.sun_radius * 4),
        )


@dataclass
class Labels:
    """Optional label texts and their visibility toggles."""

    start: Optional[str] = None
    end: Optional[str] = None
    floating: Optional[str] = None
    show_start: bool = False
    show_end: bool = False
    show_floating: bool = False


def measure_height(width: int) -> int:
    """Height the view asks for, whatever height the host proposed."""
    return int(width * ASPECT_RATIO)


def horizon_y(geometry: ViewportGeometry, style: StyleConfig) -> int:
    return geometry.bottom - style.horizon_bottom_margin


def end_label_x(geometry: ViewportGeometry, text_width: int) -> int:
    """Left edge of the end label so its right edge touches the view's right edge."""
    return geometry.right - text_width


def sun_center(
    position: ArcPosition, sizing: DerivedSizing, style: StyleConfig
) -> tuple[int, int]:
    """Pixel center of the sun for a normalized arc position."""
    x = int(position.x * sizing.available_sun_width) + (style.sun_radius * 2)
    y = (
        int(sizing.available_sun_height - (sizing.available_sun_height * position.y))
        + style.sun_radius
        + style.floating_label_margin
    )
    return x, y


def floating_label_origin(
    position: ArcPosition,
    sizing: DerivedSizing,
    style: StyleConfig,
    text_width: int,
    text_height: int,
) -> tuple[int, int]:
    """Baseline origin of the floating label, centered above the sun."""
    x = int((position.x * sizing.available_sun_width) - (text_width // 2)) + (
        style.sun_radius * 2
    )
    y = (
        int(
            (sizing.available_sun_height - (sizing.available_sun_height * position.y))
            - (text_height * 2)
        )
        + style.sun_radius
        + style.floating_label_margin
    )
    return x, y


class SceneRenderer:
    """Issues the draw calls for one frame of the sun view.

    Order is fixed: labels, horizon, clip to the area above the horizon, sun
    and floating label. The sun is never suppressed when it sits below the
    horizon; the clip hides it.
    """

    def draw(
        self,
        canvas: Canvas,
        geometry: ViewportGeometry,
        sizing: DerivedSizing,
        style: StyleConfig,
        position: ArcPosition,
        labels: Labels,
        sun_visible: bool,
    ) -> None:
        """Draw a full frame onto the canvas.

        Args:
            canvas: Target drawing surface.
            geometry: Current viewport bounds.
            sizing: Sizing derived from ``geometry`` and ``style``.
            style: Colors, typography and sizes.
            position: Normalized sun position.
            labels: Label texts and toggles.
            sun_visible: Whether "now" lies inside the displayed span.
        """
        font = load_font(style.typeface, style.text_size)

        self._draw_labels(canvas, geometry, style, labels, font)
        self._draw_horizon(canvas, geometry, style)
        canvas.clip_rect(0, 0, geometry.width, horizon_y(geometry, style))
        self._draw_sun(canvas, sizing, style, position, labels, sun_visible, font)

    def _draw_labels(self, canvas, geometry, style, labels, font) -> None:
        if labels.start is not None and labels.show_start:
            canvas.draw_text(
                labels.start, geometry.left, geometry.bottom - 1, style.color, font
            )

        if labels.end is not None and labels.show_end:
            text_width, _ = canvas.measure_text(labels.end, font)
            canvas.draw_text(
                labels.end,
                end_label_x(geometry, text_width),
                geometry.bottom - 1,
                style.color,
                font,
            )

    def _draw_horizon(self, canvas, geometry, style) -> None:
        y = horizon_y(geometry, style)
        canvas.draw_line(
            geometry.left, y, geometry.right, y, style.color, style.stroke_width
        )

    def _draw_sun(self, canvas, sizing, style, position, labels, sun_visible, font) -> None:
        cx, cy = sun_center(position, sizing, style)
        canvas.draw_filled_circle(cx, cy, style.sun_radius, style.color)

        if sun_visible and labels.show_floating and labels.floating is not None:
            text_width, text_height = canvas.measure_text(labels.floating, font)
            x, y = floating_label_origin(position, sizing, style, text_width, text_height)
            canvas.draw_text(labels.floating, x, y, style.color, font)

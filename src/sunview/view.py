"""The sun view widget.

:class:`SunView` owns all mutable state: style, viewport geometry, derived
sizing, the normalized sun position and the labels. Setters are fluent.
Progress and label setters ask the host for a redraw through the
``invalidate`` hook; style setters wait for the next natural redraw.

Everything runs on the host's drawing thread, so no locking is done.
"""

import time
from datetime import datetime
from typing import Callable, Optional

from sunview.canvas import Canvas
from sunview.config import StyleConfig
from sunview.logger import get_logger
from sunview.progress import ArcPosition, TimeValue, map_progress, map_time_span
from sunview.scene import (
    DerivedSizing,
    Labels,
    SceneRenderer,
    ViewportGeometry,
    measure_height,
)

logger = get_logger(__name__)


class SunViewError(Exception):
    """Exception raised when the host breaks a precondition of the view."""

    pass


def _now_like(start: TimeValue) -> TimeValue:
    """Current instant in the same form as ``start``.

    Datetimes get now in ``start``'s timezone (naive local time for a naive
    ``start``); numbers get epoch milliseconds.
    """
    if isinstance(start, datetime):
        return datetime.now(start.tzinfo)
    return time.time() * 1000


class SunView:
    """Sun-over-the-horizon widget."""

    def __init__(
        self,
        theme: StyleConfig,
        invalidate: Optional[Callable[[], None]] = None,
        clock: Optional[Callable[[], TimeValue]] = None,
    ):
        """Initialize the view.

        Args:
            theme: Default style values. Copied, so later setters never
                touch the caller's object.
            invalidate: Host hook that schedules a redraw.
            clock: Returns the current instant for ``set_date_progress``.
                Defaults to now in the same form as the span passed in.

        Raises:
            SunViewError: If no theme is given.
        """
        if theme is None:
            raise SunViewError("A theme is required to initialize the sun view")

        self.theme = theme
        self.style = theme.copy()
        self._invalidate = invalidate
        self._clock = clock
        self._renderer = SceneRenderer()

        self.geometry: Optional[ViewportGeometry] = None
        self.sizing: Optional[DerivedSizing] = None
        self.position = ArcPosition.ORIGIN
        self.labels = Labels()
        self.sun_visible = False
        self.redraw_requests = 0

    def invalidate(self) -> None:
        """Ask the host to redraw."""
        self.redraw_requests += 1
        if self._invalidate is not None:
            self._invalidate()

    def _resize_dependent_changed(self) -> None:
        if self.geometry is not None:
            self.sizing = DerivedSizing.compute(self.geometry, self.style)

    # Theme and style

    def apply_theme(self) -> "SunView":
        """Reset every style field to the theme's defaults."""
        self.style = self.theme.copy()
        self._resize_dependent_changed()
        return self

    def set_typeface(self, typeface: Optional[str]) -> "SunView":
        self.style.typeface = None if typeface is None else str(typeface)
        return self

    def set_color(self, color: str) -> "SunView":
        self.style.color = color
        return self

    def set_text_size(self, text_size: int) -> "SunView":
        if text_size < 1:
            raise ValueError("text_size must be positive")
        self.style.text_size = text_size
        return self

    def set_stroke_width(self, stroke_width: int) -> "SunView":
        self.style.stroke_width = stroke_width
        return self

    def set_sun_radius(self, radius: int) -> "SunView":
        self.style.sun_radius = radius
        self._resize_dependent_changed()
        return self

    def set_horizon_margin(self, margin: int) -> "SunView":
        self.style.horizon_bottom_margin = margin
        self._resize_dependent_changed()
        return self

    def set_floating_text_bottom_margin(self, margin: int) -> "SunView":
        self.style.floating_label_margin = margin
        self._resize_dependent_changed()
        return self

    # Labels

    def set_start_label(self, label: Optional[str]) -> "SunView":
        self.labels.start = label
        self.invalidate()
        return self

    def set_end_label(self, label: Optional[str]) -> "SunView":
        self.labels.end = label
        self.invalidate()
        return self

    def set_floating_label(self, label: Optional[str]) -> "SunView":
        self.labels.floating = label
        self.invalidate()
        return self

    def show_start_time(self, show: bool) -> "SunView":
        self.labels.show_start = show
        self.invalidate()
        return self

    def show_end_time(self, show: bool) -> "SunView":
        self.labels.show_end = show
        self.invalidate()
        return self

    def show_start_and_end_time(self, start_show: bool, end_show: bool) -> "SunView":
        self.labels.show_start = start_show
        self.labels.show_end = end_show
        self.invalidate()
        return self

    def show_floating_label(self, show: bool) -> "SunView":
        self.labels.show_floating = show
        self.invalidate()
        return self

    # Progress

    def set_percent_progress(self, progress: float) -> "SunView":
        """Place the sun at a progress value in [0, 1].

        Values outside [0, 1] put the sun at the arc's origin.
        """
        self.position = map_progress(progress)
        logger.debug(f"Progress {progress} -> ({self.position.x:.4f}, {self.position.y:.4f})")
        self.invalidate()
        return self

    def set_date_progress(
        self, start: TimeValue, end: TimeValue, now: Optional[TimeValue] = None
    ) -> "SunView":
        """Place the sun according to how much of [start, end] has elapsed.

        "Now" is sampled once from the clock and used for both the position
        and the floating label's visibility.

        Args:
            start: Start of the span, e.g. sunrise.
            end: End of the span, e.g. sunset.
            now: The instant to show. Sampled from the clock when omitted.
        """
        if now is None:
            now = self._clock() if self._clock is not None else _now_like(start)
        result = map_time_span(start, end, now)
        self.position = result.position
        self.sun_visible = result.visible
        logger.debug(
            f"Time span {start} - {end} at {now}: progress={result.progress}, "
            f"visible={result.visible}"
        )
        self.invalidate()
        return self

    # Host callbacks

    def on_measure(self, width: int, height: int) -> tuple[int, int]:
        """Negotiate size with the host; the proposed height is ignored."""
        return width, measure_height(width)

    def on_size_changed(self, width: int, height: int) -> None:
        """Recompute geometry and sizing for a new viewport size."""
        self.geometry = ViewportGeometry.from_size(width, height)
        self.sizing = DerivedSizing.compute(self.geometry, self.style)
        logger.debug(
            f"Resized to {width}x{height}: available sun area "
            f"{self.sizing.available_sun_width}x{self.sizing.available_sun_height}"
        )

    def draw(self, canvas: Canvas) -> None:
        """Draw the current state onto a canvas.

        Raises:
            SunViewError: If no canvas is given.
        """
        if canvas is None:
            raise SunViewError("A drawing surface is required to draw the sun view")
        if self.geometry is None:
            logger.debug("No size known yet, nothing to draw")
            return

        self._renderer.draw(
            canvas,
            self.geometry,
            self.sizing,
            self.style,
            self.position,
            self.labels,
            self.sun_visible,
        )

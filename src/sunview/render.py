"""Offscreen rendering of the sun view to images and animations."""

from pathlib import Path
from typing import Iterable

import numpy as np
from PIL import Image

from sunview.canvas import PillowCanvas
from sunview.logger import get_logger
from sunview.view import SunView

logger = get_logger(__name__)


class RenderError(Exception):
    """Exception raised when rendered output cannot be written."""

    pass


def render_image(view: SunView, width: int, background: str = "#00000000") -> Image.Image:
    """Render one frame of the view.

    The view negotiates its own height from ``width``, receives the size
    change, then draws on a fresh Pillow canvas.

    Args:
        view: Configured sun view.
        width: Output width in pixels.
        background: Background color accepted by Pillow.

    Returns:
        RGBA image.
    """
    width, height = view.on_measure(width, 0)
    if view.geometry is None or (view.geometry.width, view.geometry.height) != (
        width,
        height,
    ):
        view.on_size_changed(width, height)

    canvas = PillowCanvas(width, height, background)
    view.draw(canvas)
    return canvas.image


def render_frames(
    view: SunView, frames: int, width: int, background: str = "#00000000"
) -> list[Image.Image]:
    """Render a sweep of the sun from progress 0 to 1.

    Args:
        view: Configured sun view.
        frames: Number of evenly spaced progress values, ends included.
        width: Output width in pixels.
        background: Background color accepted by Pillow.

    Returns:
        One image per frame.
    """
    images = []
    for progress in np.linspace(0.0, 1.0, frames):
        view.set_percent_progress(float(progress))
        images.append(render_image(view, width, background))
    logger.debug(f"Rendered {len(images)} frames at width {width}")
    return images


def save_image(image: Image.Image, output_path: Path) -> Path:
    """Save a rendered frame, format taken from the file suffix.

    Raises:
        RenderError: If the file cannot be written.
    """
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        image.save(output_path)
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to save {output_path}: {e}")

    logger.info(f"Image saved: {output_path}")
    return output_path


def save_animation(
    images: Iterable[Image.Image], output_path: Path, duration_ms: int = 60
) -> Path:
    """Save frames as an animated GIF or PNG.

    Args:
        images: Frames in display order.
        output_path: Destination; ``.gif`` or ``.png``.
        duration_ms: Display time per frame.

    Returns:
        Path to the saved animation.

    Raises:
        RenderError: If there are no frames or the file cannot be written.
    """
    images = list(images)
    if not images:
        raise RenderError("No frames to save")

    first, *rest = images
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        first.save(
            output_path,
            save_all=True,
            append_images=rest,
            duration=duration_ms,
            loop=0,
            disposal=2,
        )
    except (OSError, ValueError) as e:
        raise RenderError(f"Failed to save animation {output_path}: {e}")

    logger.info(f"Animation saved: {output_path} ({len(images)} frames)")
    return output_path

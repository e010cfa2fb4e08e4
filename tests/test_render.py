"""Tests for offscreen rendering module."""

import tempfile
from pathlib import Path

import pytest
from PIL import Image

from sunview.config import StyleConfig
from sunview.render import (
    RenderError,
    render_frames,
    render_image,
    save_animation,
    save_image,
)
from sunview.view import SunView


@pytest.fixture
def temp_dir():
    """Create temporary directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def view():
    """Create a view with a solid sun color."""
    return SunView(StyleConfig(sun_radius=10, color="#FF0000")).set_percent_progress(0.5)


class TestRenderImage:
    """Tests for render_image."""

    def test_size_follows_aspect_ratio(self, view):
        """Test the image height is 0.6 times its width."""
        image = render_image(view, 200)
        assert image.size == (200, 120)
        assert view.geometry.width == 200
        assert view.sizing.available_sun_width == 200 - 40

    def test_sun_is_drawn(self, view):
        """Test the sun's center pixel has the sun color."""
        image = render_image(view, 200)
        assert image.getpixel((100, 50 + 10 + 30 - 50)) == (255, 0, 0, 255)

    def test_sun_clipped_at_horizon(self):
        """Test nothing from the sun shows below the horizon."""
        view = SunView(StyleConfig(sun_radius=10, color="#FF0000"))
        view.set_percent_progress(0.0)
        image = render_image(view, 200)
        # Horizon at y = 120 - 40 = 80; the sun is centered just below it at x = 20
        assert image.getpixel((100, 80)) == (255, 0, 0, 255)
        assert image.getpixel((20, 92)) == (0, 0, 0, 0)
        assert image.getpixel((20, 70)) == (0, 0, 0, 0)

    def test_resize_between_renders(self, view):
        """Test a new width updates sizing before drawing."""
        render_image(view, 200)
        image = render_image(view, 300)
        assert image.size == (300, 180)
        assert view.sizing.available_sun_width == 300 - 40


class TestRenderFrames:
    """Tests for render_frames."""

    def test_sweep(self, view):
        """Test a sweep ends with the sun at the end of the arc."""
        images = render_frames(view, 5, 100)
        assert len(images) == 5
        assert all(img.size == (100, 60) for img in images)
        assert view.position.x == pytest.approx(1.0)


class TestSave:
    """Tests for save_image and save_animation."""

    def test_save_png(self, view, temp_dir):
        """Test saving a PNG in a new directory."""
        path = save_image(render_image(view, 100), temp_dir / "out" / "sun.png")
        assert path.exists()
        assert Image.open(path).size == (100, 60)

    def test_save_unknown_format(self, view, temp_dir):
        """Test that an unknown format raises error."""
        with pytest.raises(RenderError, match="Failed to save"):
            save_image(render_image(view, 100), temp_dir / "sun.unknownext")

    def test_save_gif_animation(self, view, temp_dir):
        """Test saving an animated GIF."""
        images = render_frames(view, 4, 300)
        path = save_animation(images, temp_dir / "sweep.gif", duration_ms=50)

        with Image.open(path) as gif:
            assert gif.n_frames == 4

    def test_save_animation_without_frames(self, temp_dir):
        """Test that an empty animation raises error."""
        with pytest.raises(RenderError, match="No frames"):
            save_animation([], temp_dir / "empty.gif")

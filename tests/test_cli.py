"""Tests for command-line interface."""

from pathlib import Path
from unittest.mock import patch

import pytest
import yaml
from click.testing import CliRunner
from PIL import Image

from sunview.cli import cli
from sunview.config import Config, load_config


@pytest.fixture
def runner():
    """Create CLI runner."""
    return CliRunner()


class TestRenderCommand:
    """Tests for the render command."""

    def test_render_progress(self, runner, tmp_path):
        """Test rendering a progress value."""
        output = tmp_path / "sun.png"
        result = runner.invoke(
            cli, ["render", "--progress", "0.4", "--width", "250", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert "Image saved to" in result.output
        assert Image.open(output).size == (250, 150)

    def test_render_time_span(self, runner, tmp_path):
        """Test rendering a time span at a fixed instant with labels."""
        output = tmp_path / "sun.png"
        result = runner.invoke(
            cli,
            [
                "render",
                "--start", "2026-06-21T04:00:00+00:00",
                "--end", "2026-06-21T22:00:00+00:00",
                "--now", "2026-06-21T13:00:00+00:00",
                "--start-label", "04:00",
                "--end-label", "22:00",
                "--floating-label", "13:00",
                "-o", str(output),
            ],
        )

        assert result.exit_code == 0, result.output
        assert Image.open(output).size == (600, 360)

    def test_render_needs_input(self, runner, tmp_path):
        """Test that render without progress or span is a usage error."""
        result = runner.invoke(cli, ["render", "-o", str(tmp_path / "sun.png")])
        assert result.exit_code == 2
        assert "--progress" in result.output

    def test_render_rejects_mixed_input(self, runner, tmp_path):
        """Test that progress and span cannot be combined."""
        result = runner.invoke(
            cli,
            ["render", "-p", "0.5", "--start", "2026-01-01T08:00", "--end", "2026-01-01T16:00"],
        )
        assert result.exit_code == 2

    def test_render_bad_timestamp(self, runner):
        """Test that an invalid timestamp is reported."""
        result = runner.invoke(
            cli, ["render", "--start", "yesterday", "--end", "2026-01-01T16:00"]
        )
        assert result.exit_code == 2
        assert "ISO 8601" in result.output

    def test_render_missing_typeface(self, runner, tmp_path):
        """Test that an unloadable font fails cleanly."""
        config_path = tmp_path / "sunview.yaml"
        config_path.write_text(
            yaml.safe_dump({"style": {"typeface": str(tmp_path / "nope.ttf")}}),
            encoding="utf-8",
        )
        result = runner.invoke(
            cli,
            ["-c", str(config_path), "render", "-p", "0.5", "-o", str(tmp_path / "s.png")],
        )
        assert result.exit_code == 1
        assert "Render failed" in result.output


class TestAnimateCommand:
    """Tests for the animate command."""

    def test_animate(self, runner, tmp_path):
        """Test writing a sweep animation."""
        output = tmp_path / "sweep.gif"
        result = runner.invoke(
            cli, ["animate", "--frames", "6", "--width", "300", "-o", str(output)]
        )

        assert result.exit_code == 0, result.output
        assert "6 frames" in result.output
        with Image.open(output) as gif:
            assert gif.n_frames == 6

    def test_animate_too_few_frames(self, runner, tmp_path):
        """Test that a single frame is rejected."""
        result = runner.invoke(
            cli, ["animate", "--frames", "1", "-o", str(tmp_path / "sweep.gif")]
        )
        assert result.exit_code == 2


class TestWatchCommand:
    """Tests for the watch command."""

    def test_watch_bad_time(self, runner):
        """Test that an invalid clock time is rejected."""
        result = runner.invoke(cli, ["watch", "--start", "25:00", "--end", "18:00"])
        assert result.exit_code == 2
        assert "HH:MM" in result.output

    def test_watch_renders_then_stops(self, runner, tmp_path):
        """Test that watch renders once and shuts down on interrupt."""
        output = tmp_path / "sun.png"
        with patch("sunview.cli.time.sleep", side_effect=KeyboardInterrupt):
            result = runner.invoke(
                cli,
                ["watch", "--start", "06:00", "--end", "18:00", "-o", str(output)],
            )

        assert result.exit_code == 0, result.output
        assert "Shutting down" in result.output
        assert output.exists()


class TestConfigCommand:
    """Tests for the config command."""

    def test_show(self, runner):
        """Test showing the configuration."""
        result = runner.invoke(cli, ["config", "--show"])
        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["style"]["sun_radius"] == 20

    def test_create(self, runner, tmp_path):
        """Test creating a default configuration file."""
        output = tmp_path / "config" / "sunview.yaml"
        result = runner.invoke(cli, ["config", "--create", "-o", str(output)])

        assert result.exit_code == 0
        data = yaml.safe_load(Path(output).read_text(encoding="utf-8"))
        assert data["render"]["width"] == 600

    def test_create_round_trips_defaults(self, runner, tmp_path):
        """Test the created file loads back as the default configuration."""
        output = tmp_path / "sunview.yaml"
        runner.invoke(cli, ["config", "--create", "-o", str(output)])

        assert load_config(output).to_dict() == Config().to_dict()

    def test_create_uses_save_config(self, runner, tmp_path):
        """Test creation writes through the shared config writer."""
        output = tmp_path / "sunview.yaml"
        with patch("sunview.cli.save_config") as mock_save:
            result = runner.invoke(cli, ["config", "--create", "-o", str(output)])

        assert result.exit_code == 0
        config, path = mock_save.call_args[0]
        assert config == Config()
        assert path == output

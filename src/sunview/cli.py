"""Command-line interface for SunView."""

import time
from datetime import datetime
from datetime import time as dt_time
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import click
import yaml

from sunview import __version__
from sunview.canvas import CanvasError
from sunview.config import Config, load_config, save_config
from sunview.logger import setup_logger
from sunview.render import (
    RenderError,
    render_frames,
    render_image,
    save_animation,
    save_image,
)
from sunview.scheduler import DailySpan, RedrawScheduler
from sunview.view import SunView


def _parse_instant(value: str, tz: ZoneInfo) -> datetime:
    """Parse an ISO 8601 timestamp, assuming ``tz`` when it has no offset."""
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        raise click.BadParameter(f"'{value}' is not an ISO 8601 timestamp")
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=tz)
    return parsed


def _parse_clock_time(value: str) -> tuple[int, int]:
    """Parse HH:MM (24-hour)."""
    try:
        hour, minute = (int(part) for part in value.split(":"))
        if not (0 <= hour <= 23 and 0 <= minute <= 59):
            raise ValueError()
    except ValueError:
        raise click.BadParameter(f"'{value}' is not in HH:MM format (24-hour)")
    return hour, minute


def _build_view(
    config: Config,
    start_label: Optional[str],
    end_label: Optional[str],
    floating_label: Optional[str],
    clock=None,
) -> SunView:
    view = SunView(config.style, clock=clock)
    view.set_start_label(start_label).show_start_time(start_label is not None)
    view.set_end_label(end_label).show_end_time(end_label is not None)
    view.set_floating_label(floating_label).show_floating_label(floating_label is not None)
    return view


@click.group()
@click.version_option(version=__version__, prog_name="sunview")
@click.option(
    "-c",
    "--config",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path]) -> None:
    """SunView.

    Draws the sun's progress over a horizon line.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@cli.command()
@click.option("--progress", "-p", type=float, help="Progress between 0 and 1")
@click.option("--start", help="Start of the span (ISO 8601)")
@click.option("--end", help="End of the span (ISO 8601)")
@click.option("--now", help="Instant to show (ISO 8601), defaults to the current time")
@click.option("--start-label", help="Text under the left end of the horizon")
@click.option("--end-label", help="Text under the right end of the horizon")
@click.option("--floating-label", help="Text that follows the sun")
@click.option("--width", "-w", type=int, help="Output width in pixels")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("sunview.png"),
    help="Output image path",
)
@click.pass_context
def render(
    ctx: click.Context,
    progress: Optional[float],
    start: Optional[str],
    end: Optional[str],
    now: Optional[str],
    start_label: Optional[str],
    end_label: Optional[str],
    floating_label: Optional[str],
    width: Optional[int],
    output: Path,
) -> None:
    """Render a single frame to an image file."""
    config = load_config(ctx.obj.get("config_path"))
    setup_logger(config.logging)

    if progress is None and (start is None or end is None):
        raise click.UsageError("Give either --progress or both --start and --end")
    if progress is not None and (start is not None or end is not None):
        raise click.UsageError("--progress cannot be combined with --start/--end")

    tz = ZoneInfo(config.refresh.timezone)
    clock = None
    if now is not None:
        instant = _parse_instant(now, tz)
        clock = lambda: instant  # noqa: E731

    try:
        view = _build_view(config, start_label, end_label, floating_label, clock)
        if progress is not None:
            view.set_percent_progress(progress)
        else:
            view.set_date_progress(_parse_instant(start, tz), _parse_instant(end, tz))

        image = render_image(view, width or config.render.width, config.render.background)
        save_image(image, output)
    except (CanvasError, RenderError) as e:
        click.echo(f"Render failed: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Image saved to: {output}")


@cli.command()
@click.option("--frames", "-n", type=int, help="Number of frames in the sweep")
@click.option("--floating-label", help="Text that follows the sun")
@click.option("--width", "-w", type=int, help="Output width in pixels")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("sunview.gif"),
    help="Output animation path (.gif or .png)",
)
@click.pass_context
def animate(
    ctx: click.Context,
    frames: Optional[int],
    floating_label: Optional[str],
    width: Optional[int],
    output: Path,
) -> None:
    """Render a sunrise-to-sunset sweep as an animation."""
    config = load_config(ctx.obj.get("config_path"))
    setup_logger(config.logging)

    frames = frames or config.render.frames
    if frames < 2:
        raise click.BadParameter("at least 2 frames are needed", param_hint="--frames")

    try:
        view = _build_view(config, None, None, floating_label)
        # A sweep has no time span, so the floating label is always on
        view.sun_visible = True
        images = render_frames(
            view, frames, width or config.render.width, config.render.background
        )
        save_animation(images, output, config.render.frame_duration_ms)
    except (CanvasError, RenderError) as e:
        click.echo(f"Animation failed: {e}", err=True)
        ctx.exit(1)

    click.echo(f"Animation saved to: {output} ({frames} frames)")


@cli.command()
@click.option("--start", "start_time", required=True, help="Sunrise, HH:MM local time")
@click.option("--end", "end_time", required=True, help="Sunset, HH:MM local time")
@click.option("--floating-label", help="Text that follows the sun")
@click.option("--width", "-w", type=int, help="Output width in pixels")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("sunview.png"),
    help="Image path rewritten on every refresh",
)
@click.pass_context
def watch(
    ctx: click.Context,
    start_time: str,
    end_time: str,
    floating_label: Optional[str],
    width: Optional[int],
    output: Path,
) -> None:
    """Keep an image of today's sun progress up to date."""
    config = load_config(ctx.obj.get("config_path"))
    setup_logger(config.logging)

    span = DailySpan(
        dt_time(*_parse_clock_time(start_time)), dt_time(*_parse_clock_time(end_time))
    )
    width = width or config.render.width
    view = _build_view(config, start_time, end_time, floating_label)

    def write_frame(updated: SunView) -> None:
        save_image(render_image(updated, width, config.render.background), output)

    click.echo("Starting sun view refresh...")
    click.echo(f"  Span: {start_time} - {end_time} ({config.refresh.timezone})")
    click.echo(f"  Interval: {config.refresh.interval_seconds}s")
    click.echo(f"  Output: {output}")
    click.echo("\nPress Ctrl+C to stop.\n")

    scheduler = RedrawScheduler(config.refresh, view, span, write_frame)
    try:
        scheduler.refresh()
    except (CanvasError, RenderError) as e:
        click.echo(f"Refresh failed: {e}", err=True)
        ctx.exit(1)

    scheduler.start()
    try:
        while scheduler.is_running():
            time.sleep(1)
    except KeyboardInterrupt:
        click.echo("\nShutting down...")
    finally:
        scheduler.stop()


@cli.command("config")
@click.option("--show", is_flag=True, help="Show current configuration")
@click.option("--create", is_flag=True, help="Create default configuration file")
@click.option(
    "--output",
    "-o",
    type=click.Path(path_type=Path),
    default=Path("config/sunview.yaml"),
    help="Output path for configuration file",
)
@click.pass_context
def config_cmd(
    ctx: click.Context, show: bool, create: bool, output: Path
) -> None:
    """Manage configuration."""
    config_path = ctx.obj.get("config_path")

    if show:
        config = load_config(config_path)
        click.echo(yaml.dump(config.to_dict(), default_flow_style=False, allow_unicode=True))
        return

    if create:
        if output.exists():
            if not click.confirm(f"{output} already exists. Overwrite?"):
                return

        save_config(Config(), output)

        click.echo(f"Configuration file created: {output}")
        return

    # Default: show help
    ctx.invoke(config_cmd, show=True)


if __name__ == "__main__":
    cli()

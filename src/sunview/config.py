"""Configuration management module for SunView."""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml


@dataclass
class StyleConfig:
    """Theme defaults for the sun view, in pixels where applicable."""

    sun_radius: int = 20
    horizon_bottom_margin: int = 40  # Bottom of the view to the horizon line
    floating_label_margin: int = 30  # Room above the arc for the floating text
    stroke_width: int = 4
    text_size: int = 28
    color: str = "#FFB300"
    typeface: Optional[str] = None  # Path to a TrueType/OpenType font

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in (
            "sun_radius",
            "horizon_bottom_margin",
            "floating_label_margin",
            "stroke_width",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be non-negative")
        if self.text_size < 1:
            raise ValueError("text_size must be positive")
        if not isinstance(self.color, str) or not self.color:
            raise ValueError("color must be a non-empty color string")
        if self.typeface is not None:
            self.typeface = str(self.typeface)

    def copy(self) -> "StyleConfig":
        """Return an independent copy of this style."""
        return StyleConfig(**{f.name: getattr(self, f.name) for f in fields(self)})


@dataclass
class RenderConfig:
    """Offscreen rendering settings."""

    width: int = 600
    background: str = "#00000000"  # Transparent
    frames: int = 48
    frame_duration_ms: int = 60

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.width < 1:
            raise ValueError("width must be positive")
        if self.frames < 2:
            raise ValueError("frames must be at least 2")
        if self.frame_duration_ms < 1:
            raise ValueError("frame_duration_ms must be positive")


@dataclass
class RefreshConfig:
    """Periodic redraw settings."""

    interval_seconds: int = 60
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.interval_seconds < 1:
            raise ValueError("interval_seconds must be positive")
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"Unknown timezone '{self.timezone}'")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "INFO"
    file: Optional[Path] = None
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate and convert configuration values."""
        if isinstance(self.file, str):
            self.file = Path(self.file)
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        self.level = self.level.upper()


@dataclass
class Config:
    """Main configuration container."""

    style: StyleConfig = field(default_factory=StyleConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        return cls(
            style=StyleConfig(**data.get("style", {})),
            render=RenderConfig(**data.get("render", {})),
            refresh=RefreshConfig(**data.get("refresh", {})),
            logging=LoggingConfig(**data.get("logging", {})),
        )

    def to_dict(self) -> dict:
        """Convert Config to dictionary."""
        return {
            "style": {
                "sun_radius": self.style.sun_radius,
                "horizon_bottom_margin": self.style.horizon_bottom_margin,
                "floating_label_margin": self.style.floating_label_margin,
                "stroke_width": self.style.stroke_width,
                "text_size": self.style.text_size,
                "color": self.style.color,
                "typeface": self.style.typeface,
            },
            "render": {
                "width": self.render.width,
                "background": self.render.background,
                "frames": self.render.frames,
                "frame_duration_ms": self.render.frame_duration_ms,
            },
            "refresh": {
                "interval_seconds": self.refresh.interval_seconds,
                "timezone": self.refresh.timezone,
            },
            "logging": {
                "level": self.logging.level,
                "file": str(self.logging.file) if self.logging.file else None,
                "max_size_mb": self.logging.max_size_mb,
                "backup_count": self.logging.backup_count,
            },
        }


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        Config object with loaded or default values.
    """
    if config_path is None:
        default_paths = [
            Path("config/sunview.yaml"),
            Path.home() / ".config" / "sunview" / "config.yaml",
        ]
        for path in default_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return Config()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Config object to save.
        config_path: Path to save configuration file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, allow_unicode=True)

"""Progress mapping for the sun arc.

Turns a normalized progress value, or a start/end pair and a sample of "now",
into a position on the stylised semicircular arc. Coordinates are normalized:
``x`` runs from 0 (left) to 1 (right) and ``y`` from 0 (horizon) to 1 (top of
the arc).
"""

import math
from dataclasses import dataclass
from datetime import datetime
from typing import ClassVar, Optional, Union

TimeValue = Union[datetime, float, int]


@dataclass(frozen=True)
class ArcPosition:
    """Normalized position of the sun on the arc."""

    x: float
    y: float

    ORIGIN: ClassVar["ArcPosition"]


ArcPosition.ORIGIN = ArcPosition(0.0, 0.0)


@dataclass(frozen=True)
class TimeSpanProgress:
    """Result of mapping a time span onto the arc."""

    position: ArcPosition
    visible: bool  # start <= now <= end
    progress: Optional[float]  # None for a zero-length span


def map_progress(progress: float) -> ArcPosition:
    """Map a progress value in [0, 1] onto the arc.

    Progress outside [0, 1] (or NaN) is placed at the origin rather than
    clamped to the nearest end of the arc.

    Args:
        progress: Fraction of the span that has elapsed.

    Returns:
        Normalized arc position.
    """
    if math.isnan(progress) or progress > 1 or progress < 0:
        return ArcPosition.ORIGIN

    position = math.pi + (progress * math.pi)
    x = (50 + math.cos(position) * 50) / 100
    y = abs(math.sin(position) * 100) / 100
    return ArcPosition(x, y)


def map_time_span(start: TimeValue, end: TimeValue, now: TimeValue) -> TimeSpanProgress:
    """Map the elapsed part of a time span onto the arc.

    ``start``, ``end`` and ``now`` must all be datetimes or all be numbers
    (for example epoch milliseconds). Visibility is checked on the raw values
    with closed bounds and does not depend on the mapped position.

    Args:
        start: Start of the span (sunrise).
        end: End of the span (sunset).
        now: The instant to place on the arc.

    Returns:
        Arc position, visibility and the raw progress ratio.
    """
    span = end - start
    visible = start <= now <= end

    if not span:
        return TimeSpanProgress(ArcPosition.ORIGIN, visible, None)

    progress = (now - start) / span
    return TimeSpanProgress(map_progress(progress), visible, progress)

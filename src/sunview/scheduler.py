"""Periodic redraw of a sun view over a daily sunrise/sunset span."""

from dataclasses import dataclass
from datetime import datetime, time, timedelta
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from sunview.config import RefreshConfig
from sunview.logger import get_logger
from sunview.view import SunView

logger = get_logger(__name__)


@dataclass(frozen=True)
class DailySpan:
    """Wall-clock start and end of the sun's day; may cross midnight."""

    start: time
    end: time

    def _on(self, day, tz) -> tuple[datetime, datetime]:
        start = datetime.combine(day, self.start, tzinfo=tz)
        end = datetime.combine(day, self.end, tzinfo=tz)
        if end < start:
            end += timedelta(days=1)
        return start, end

    def around(self, now: datetime) -> tuple[datetime, datetime]:
        """Return the span ``now`` falls in, or today's span otherwise.

        An overnight span that started yesterday still covers the early
        hours of today.
        """
        start, end = self._on(now.date(), now.tzinfo)
        if now < start:
            prev_start, prev_end = self._on(now.date() - timedelta(days=1), now.tzinfo)
            if now <= prev_end:
                return prev_start, prev_end
        return start, end


class RedrawScheduler:
    """Keeps a sun view on today's span and redraws it at a fixed interval."""

    def __init__(
        self,
        config: RefreshConfig,
        view: SunView,
        span: DailySpan,
        on_frame: Callable[[SunView], None],
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """Initialize the scheduler.

        Args:
            config: Refresh interval and timezone.
            view: The view to update.
            span: Daily sunrise and sunset.
            on_frame: Called with the updated view, e.g. to render it to a file.
            clock: Returns the current time; defaults to now in the configured
                timezone.
        """
        self.config = config
        self.view = view
        self.span = span
        self.on_frame = on_frame
        self._timezone = ZoneInfo(config.timezone)
        self._clock = clock or (lambda: datetime.now(self._timezone))
        self._scheduler: Optional[BackgroundScheduler] = None
        self._job_id = "sun_refresh"

    def refresh(self) -> None:
        """Move the sun to the current time and hand the view to ``on_frame``."""
        now = self._clock()
        start, end = self.span.around(now)
        self.view.set_date_progress(start, end, now=now)
        self.on_frame(self.view)

    def _refresh_job(self) -> None:
        try:
            self.refresh()
        except Exception as e:
            logger.error(f"Refresh failed: {e}")

    def start(self) -> None:
        """Start periodic refreshes."""
        if self.is_running():
            logger.warning("Scheduler already running")
            return

        self._scheduler = BackgroundScheduler(timezone=self._timezone)
        self._scheduler.add_job(
            self._refresh_job,
            trigger=IntervalTrigger(
                seconds=self.config.interval_seconds, timezone=self._timezone
            ),
            id=self._job_id,
            name="Sun View Refresh",
            replace_existing=True,
        )
        self._scheduler.start()

        next_run = self.get_next_refresh_time()
        logger.info(
            f"Scheduler started. Next refresh at {next_run.strftime('%Y-%m-%d %H:%M:%S %Z')}"
        )

    def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=True)
            self._scheduler = None
            logger.info("Scheduler stopped")

    def is_running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def get_next_refresh_time(self) -> Optional[datetime]:
        """Next scheduled refresh, or None when not running."""
        if not self.is_running():
            return None
        job = self._scheduler.get_job(self._job_id)
        return job.next_run_time if job is not None else None

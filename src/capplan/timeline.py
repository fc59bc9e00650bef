"""The visible window of days used for load reports."""

from __future__ import annotations

from datetime import date, timedelta

from .config import MAX_WEEKS_TO_SHOW, MIN_WEEKS_TO_SHOW
from .dates import start_of_week

DAYS_PER_WEEK = 7


class TimelineWindow:
    """A run of consecutive days, paged a week at a time.

    The window starts on the Monday of the current week unless told otherwise.
    """

    def __init__(self, start: date | None = None, weeks_to_show: int = 3) -> None:
        self.start = start if start is not None else start_of_week(date.today())  # noqa: DTZ011
        self.weeks_to_show = weeks_to_show

    @property
    def days_to_show(self) -> int:
        return self.weeks_to_show * DAYS_PER_WEEK

    @property
    def end(self) -> date:
        """Last day in the window (inclusive)."""
        return self.start + timedelta(days=self.days_to_show - 1)

    @property
    def dates(self) -> list[date]:
        return [self.start + timedelta(days=i) for i in range(self.days_to_show)]

    def next_week(self) -> None:
        self.shift_days(DAYS_PER_WEEK)

    def prev_week(self) -> None:
        self.shift_days(-DAYS_PER_WEEK)

    def shift_days(self, days: int) -> None:
        self.start += timedelta(days=days)

    def scroll_to_today(self, today: date | None = None) -> None:
        """Move the window to the week containing today."""
        self.start = start_of_week(today if today is not None else date.today())  # noqa: DTZ011

    def set_weeks(self, weeks: int) -> bool:
        """Change the window width. Widths outside 2-5 weeks are ignored."""
        if MIN_WEEKS_TO_SHOW <= weeks <= MAX_WEEKS_TO_SHOW:
            self.weeks_to_show = weeks
            return True
        return False

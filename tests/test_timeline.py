"""Tests for the timeline window."""

from datetime import date

from capplan.timeline import TimelineWindow


def test_defaults_to_monday_of_current_week() -> None:
    window = TimelineWindow()
    assert window.start.weekday() == 0
    assert 0 <= (date.today() - window.start).days < 7  # noqa: DTZ011
    assert window.weeks_to_show == 3
    assert window.days_to_show == 21


def test_dates() -> None:
    window = TimelineWindow(start=date(2026, 1, 26), weeks_to_show=2)
    assert len(window.dates) == 14
    assert window.dates[0] == date(2026, 1, 26)
    assert window.dates[-1] == date(2026, 2, 8)
    assert window.end == date(2026, 2, 8)


def test_paging() -> None:
    window = TimelineWindow(start=date(2026, 1, 12))
    window.next_week()
    assert window.start == date(2026, 1, 19)
    window.prev_week()
    window.prev_week()
    assert window.start == date(2026, 1, 5)
    window.shift_days(3)
    assert window.start == date(2026, 1, 8)


def test_scroll_to_today() -> None:
    window = TimelineWindow(start=date(2020, 1, 1))
    window.scroll_to_today(today=date(2026, 1, 18))
    assert window.start == date(2026, 1, 12)


def test_set_weeks_bounds() -> None:
    window = TimelineWindow(start=date(2026, 1, 12))
    assert window.set_weeks(5)
    assert window.days_to_show == 35
    assert not window.set_weeks(1)
    assert not window.set_weeks(6)
    assert window.weeks_to_show == 5
    assert window.set_weeks(2)
    assert window.weeks_to_show == 2

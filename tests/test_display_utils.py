"""Tests for console rendering."""

from datetime import datetime

from rich.console import Console

from schedule_state import ScheduleState
from display_utils import TimelineDisplay


def make_display():
    return TimelineDisplay(Console(record=True, width=100))


class TestTimelineDisplay:
    def test_working_day(self):
        display = make_display()
        day, shift, times = ScheduleState().relevant_timeline(datetime(2025, 1, 14, 21, 0))
        display.show_day(day, shift, times)
        text = display.console.export_text()
        assert "Tomorrow (Wednesday): Morning" in text
        assert "Earliest alarm" in text
        assert "06:40" in text

    def test_rest_day(self):
        display = make_display()
        day, shift, times = ScheduleState().relevant_timeline(datetime(2025, 1, 17, 22, 0))
        display.show_day(day, shift, times)
        assert "Rest day" in display.console.export_text()

    def test_week(self):
        display = make_display()
        display.show_week(ScheduleState().weekly_overview())
        text = display.console.export_text()
        assert "Monday" in text and "Sunday" in text
        assert "--:--" in text

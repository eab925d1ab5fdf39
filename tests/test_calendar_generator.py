"""Tests for calendar reminder export."""

from datetime import datetime, date

import pytest

from config_loader import CalendarConfig
from schedule_state import ScheduleState
from shift_models import Shift, UserPreferences, DailyPlan
from calendar_generator import ReminderExporter


@pytest.fixture
def exporter(tmp_path):
    return ReminderExporter(CalendarConfig(timezone="UTC", output_dir=str(tmp_path / "out")))


def ics_lines(content: bytes):
    return content.decode("utf-8").split("\r\n")


class TestNextOccurrence:
    def test_later_today(self, exporter):
        now = datetime(2025, 1, 15, 5, 0)
        assert exporter.next_occurrence("06:30", now) == datetime(2025, 1, 15, 6, 30, tzinfo=exporter.timezone)

    def test_already_passed_rolls_to_tomorrow(self, exporter):
        now = datetime(2025, 1, 15, 21, 0)
        assert exporter.next_occurrence("06:30", now).date() == date(2025, 1, 16)


class TestExportReminder:
    def test_event_structure(self, exporter):
        content = exporter.export_reminder("06:30", "Earliest alarm", datetime(2025, 1, 15, 21, 0))
        lines = ics_lines(content)
        assert lines[0] == "BEGIN:VCALENDAR"
        assert "DTSTART:20250116T063000Z" in lines
        assert "DTEND:20250116T063500Z" in lines
        assert "SUMMARY:Wake-up alarm: Earliest alarm" in lines
        assert "TRIGGER:-PT0M" in lines
        assert lines[-2] == "END:VCALENDAR"

    def test_timezone_converted_to_utc(self, tmp_path):
        exporter = ReminderExporter(CalendarConfig(timezone="Europe/Berlin"))
        content = exporter.export_reminder("06:30", "Alarm", datetime(2025, 1, 15, 5, 0))
        # Berlin is UTC+1 in January
        assert "DTSTART:20250115T053000Z" in ics_lines(content)

    def test_unknown_timezone_falls_back(self):
        assert str(ReminderExporter(CalendarConfig(timezone="Mars/Olympus")).timezone) == "UTC"

    def test_rest_day_rejected(self, exporter):
        with pytest.raises(ValueError):
            exporter.export_reminder("--:--", "Alarm")

    def test_save_reminder(self, exporter):
        path = exporter.save_reminder("06:55", "Alarm", datetime(2025, 1, 15, 21, 0))
        assert path.name == "alarm_0655.ics"
        assert path.read_bytes().startswith(b"BEGIN:VCALENDAR")


class TestExportWeek:
    def test_one_event_per_working_day(self, exporter):
        content = exporter.export_week(ScheduleState(), date(2025, 1, 13))
        lines = ics_lines(content)
        assert lines.count("BEGIN:VEVENT") == 5
        # Monday morning shift 08:00, default buffers put the alarm at 06:40
        assert "DTSTART:20250113T064000Z" in lines

    def test_alarm_before_midnight_lands_on_previous_day(self, exporter):
        late = Shift(id='n', name='Late', start_time='00:30', end_time='08:30')
        state = ScheduleState(
            shifts=[late, Shift(id='off', name='Rest', start_time='00:00', end_time='00:00')],
            preferences=UserPreferences(early_arrival=15, commute=25, wash_up=10, snooze=30),
            weekly_plan=DailyPlan.from_list(['off', 'off', 'n', 'off', 'off', 'off', 'off']),
        )
        lines = ics_lines(exporter.export_week(state, date(2025, 1, 13)))
        assert lines.count("BEGIN:VEVENT") == 1
        # Wednesday's 00:30 shift means a 23:10 alarm on Tuesday
        assert "DTSTART:20250114T231000Z" in lines

    def test_week_must_start_monday(self, exporter):
        with pytest.raises(ValueError):
            exporter.export_week(ScheduleState(), date(2025, 1, 15))

    def test_unknown_checkpoint(self, exporter):
        with pytest.raises(ValueError):
            exporter.export_week(ScheduleState(), date(2025, 1, 13), checkpoint="lunch_time")

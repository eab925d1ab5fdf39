#!/usr/bin/env python3
"""ICS reminder generator for alarm and departure checkpoints."""

import uuid
from datetime import datetime, date, time, timedelta, UTC
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError
from pathlib import Path
from typing import List, Optional

from logging_config import setup_logger
from time_utils import NOT_APPLICABLE, parse_time_string
from shift_models import CalculatedTimes, WEEK_DAYS
from timeline_calculator import checkpoint_minutes
from config_loader import CalendarConfig
from schedule_state import ScheduleState


class ReminderExporter:
    """Turns HH:MM checkpoints into calendar reminder files."""

    def __init__(self, calendar_config: Optional[CalendarConfig] = None):
        self.config = calendar_config or CalendarConfig()
        try:
            self.timezone = ZoneInfo(self.config.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            self.timezone = ZoneInfo("UTC")
        self.logger = setup_logger('calendar_generator')

    def _format_utc(self, moment: datetime) -> str:
        return moment.astimezone(ZoneInfo("UTC")).strftime("%Y%m%dT%H%M%SZ")

    def _fold_ics_text(self, text: str) -> str:
        """Escape newlines for ICS property values."""
        text = text.replace("\r\n", "\n").replace("\r", "\n")
        return text.replace("\n", "\\n")

    def next_occurrence(self, time_str: str, now: Optional[datetime] = None) -> datetime:
        """Next local datetime at time_str: today, or tomorrow if that has already passed."""
        if now is None:
            now = datetime.now(self.timezone)
        elif now.tzinfo is None:
            now = now.replace(tzinfo=self.timezone)
        else:
            now = now.astimezone(self.timezone)
        target = datetime.combine(now.date(), parse_time_string(time_str)).replace(tzinfo=self.timezone)
        if target < now:
            target += timedelta(days=1)
        return target

    def _create_calendar_header(self, calendar_name: str) -> List[str]:
        return [
            "BEGIN:VCALENDAR",
            "VERSION:2.0",
            "PRODID:-//Shift Clock//Alarm Reminder//EN",
            f"X-WR-CALNAME:{calendar_name}",
            f"X-WR-TIMEZONE:{self.timezone}",
        ]

    def _add_event(self, lines: List[str], start: datetime, summary: str,
                   description: str = "", event_id: str = None):
        uid = f"{event_id or uuid.uuid4()}@shift-clock"
        end = start + timedelta(minutes=self.config.reminder_duration)
        lines.append("BEGIN:VEVENT")
        lines.append(f"DTSTART:{self._format_utc(start)}")
        lines.append(f"DTEND:{self._format_utc(end)}")
        lines.append(f"DTSTAMP:{datetime.now(UTC).strftime('%Y%m%dT%H%M%SZ')}")
        lines.append(f"UID:{uid}")
        lines.append(f"SUMMARY:{self._fold_ics_text(summary)}")
        if description:
            lines.append(f"DESCRIPTION:{self._fold_ics_text(description)}")

        # Fire at the event start
        lines.append("BEGIN:VALARM")
        lines.append("TRIGGER:-PT0M")
        lines.append("ACTION:DISPLAY")
        lines.append(f"DESCRIPTION:{self._fold_ics_text(summary)}")
        lines.append("END:VALARM")
        lines.append("END:VEVENT")

    def _finish(self, lines: List[str]) -> bytes:
        lines.append("END:VCALENDAR")
        return ("\r\n".join(lines) + "\r\n").encode("utf-8")

    def export_reminder(self, time_str: str, title: str, now: Optional[datetime] = None) -> bytes:
        """Build a single-reminder calendar for the next occurrence of time_str."""
        if time_str == NOT_APPLICABLE:
            raise ValueError("Nothing to remind about on a rest day")

        start = self.next_occurrence(time_str, now)
        lines = self._create_calendar_header(self.config.title_prefix)
        self._add_event(lines, start, f"{self.config.title_prefix}: {title}",
                        "Generated by Shift Clock")
        self.logger.debug(f"Reminder '{title}' scheduled for {start.isoformat()}")
        return self._finish(lines)

    @staticmethod
    def reminder_filename(time_str: str) -> str:
        return f"alarm_{time_str.replace(':', '')}.ics"

    def save_reminder(self, time_str: str, title: str, now: Optional[datetime] = None) -> Path:
        """Write a reminder file into the configured output directory."""
        output_dir = Path(self.config.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

        path = output_dir / self.reminder_filename(time_str)
        with open(path, 'wb') as f:
            f.write(self.export_reminder(time_str, title, now))

        self.logger.info(f"Reminder written to {path}")
        return path

    def export_week(self, state: ScheduleState, week_start: date, meal_selection: str = "none",
                    checkpoint: str = "earliest_alarm") -> bytes:
        """One reminder per working day of the week starting at week_start (a Monday).

        Checkpoints that fall before midnight are placed on the previous
        calendar day instead of being wrapped onto the shift's own day.
        """
        if checkpoint not in CalculatedTimes.LABELS:
            raise ValueError(f"Unknown checkpoint: {checkpoint}")
        if week_start.weekday() != 0:
            raise ValueError(f"Week must start on a Monday, got {week_start:%A}")

        label = CalculatedTimes.LABELS[checkpoint]
        lines = self._create_calendar_header(f"{self.config.title_prefix} ({label})")

        for day_index in range(7):
            shift = state.shift_for_day(day_index)
            if state.rest_detection.is_rest(shift):
                continue

            minutes = checkpoint_minutes(shift, state.preferences, meal_selection)[checkpoint]
            shift_date = week_start + timedelta(days=day_index)
            start = datetime.combine(shift_date, time(0, 0)).replace(tzinfo=self.timezone)
            start += timedelta(minutes=minutes)

            summary = f"{label}: {shift.name}"
            description = f"{WEEK_DAYS[day_index]} shift {shift.start_time}-{shift.end_time}"
            event_id = f"{checkpoint}-{shift_date.isoformat()}"
            self._add_event(lines, start, summary, description, event_id)

        return self._finish(lines)

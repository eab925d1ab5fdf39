#!/usr/bin/env python3
"""Editable schedule state: shift catalog, buffers and weekly plan.

The state object is owned by whichever surface is running (CLI run, API app)
and handed to the calculation functions explicitly. All edits go through the
methods here so the catalog and preference invariants hold before anything
is calculated.
"""

import time
from dataclasses import fields, replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from logging_config import setup_logger
from time_utils import is_valid_time_string
from shift_models import (
    Shift, UserPreferences, DailyPlan, RestDetection, CalculatedTimes,
    default_shifts, default_plan,
)
from timeline_calculator import calculate_timeline
from day_selector import RelevantDay, select_relevant_day, select_tomorrow, find_shift, resolve_shift


class ScheduleError(ValueError):
    """Raised when an edit would break the schedule's invariants."""


class ScheduleState:
    """Holds the user's shifts, preferences and weekly plan."""

    EDITABLE_SHIFT_FIELDS = ('name', 'start_time', 'end_time')

    def __init__(self, shifts: Optional[List[Shift]] = None,
                 preferences: Optional[UserPreferences] = None,
                 weekly_plan: Optional[DailyPlan] = None,
                 rest_detection: Optional[RestDetection] = None):
        self.shifts = list(shifts) if shifts is not None else default_shifts()
        self.preferences = preferences or UserPreferences()
        # Own copy so edits never reach the caller's plan
        self.weekly_plan = (DailyPlan.from_list(weekly_plan.to_list())
                            if weekly_plan is not None else default_plan())
        self.rest_detection = rest_detection or RestDetection()
        self.logger = setup_logger('schedule_state')

        if not self.shifts:
            raise ScheduleError("Shift catalog must contain at least one shift")

    # === Shift catalog ===

    def get_shift(self, shift_id: str) -> Shift:
        shift = find_shift(self.shifts, shift_id)
        if shift is None:
            raise ScheduleError(f"Unknown shift id: {shift_id}")
        return shift

    def add_shift(self, name: str = "New shift", start_time: str = "09:00",
                  end_time: str = "18:00") -> Shift:
        """Append a shift with a timestamp-based id."""
        self._check_times(start_time, end_time)

        shift_id = str(time.time_ns() // 1_000_000)
        while find_shift(self.shifts, shift_id) is not None:
            shift_id = str(int(shift_id) + 1)

        shift = Shift(id=shift_id, name=name, start_time=start_time, end_time=end_time)
        self.shifts.append(shift)
        self.logger.info(f"Added shift '{name}' ({start_time}-{end_time})")
        return shift

    def update_shift(self, shift_id: str, **changes: Any) -> Shift:
        """Change name, start_time or end_time of a shift."""
        shift = self.get_shift(shift_id)

        unknown = set(changes) - set(self.EDITABLE_SHIFT_FIELDS)
        if unknown:
            raise ScheduleError(f"Cannot edit shift field(s): {', '.join(sorted(unknown))}")

        updated = replace(shift, **changes)
        self._check_times(updated.start_time, updated.end_time)

        self.shifts[self.shifts.index(shift)] = updated
        self.logger.info(f"Updated shift '{updated.name}'")
        return updated

    def delete_shift(self, shift_id: str) -> None:
        """Remove a shift. The last shift and the rest shift cannot be removed."""
        shift = self.get_shift(shift_id)

        if len(self.shifts) <= 1:
            self.logger.warning(f"Refused to delete '{shift.name}': it is the last shift")
            raise ScheduleError("Cannot delete the last remaining shift")
        if self.rest_detection.is_rest(shift):
            self.logger.warning(f"Refused to delete rest shift '{shift.name}'")
            raise ScheduleError("Cannot delete the rest shift")
        working = [s for s in self.shifts if not self.rest_detection.is_rest(s)]
        if working == [shift]:
            self.logger.warning(f"Refused to delete '{shift.name}': it is the last working shift")
            raise ScheduleError("Cannot delete the last working shift")

        self.shifts.remove(shift)

        # Days that pointed at the deleted shift become rest days
        for day in self.weekly_plan:
            if day.shift_id == shift_id:
                day.shift_id = None
        self.logger.info(f"Deleted shift '{shift.name}'")

    def _check_times(self, *values: str) -> None:
        for value in values:
            if not is_valid_time_string(value):
                raise ScheduleError(f"Invalid time '{value}', expected HH:MM")

    # === Weekly plan ===

    def assign_shift(self, day_index: int, shift_id: Optional[str]) -> None:
        if not 0 <= day_index <= 6:
            raise ScheduleError(f"Day index must be 0-6, got {day_index}")
        if shift_id is not None:
            self.get_shift(shift_id)
        self.weekly_plan[day_index].shift_id = shift_id
        self.logger.debug(f"Day {day_index} assigned to shift {shift_id}")

    def shift_for_day(self, day_index: int) -> Shift:
        return resolve_shift(self.weekly_plan, self.shifts, day_index, self.rest_detection)

    # === Preferences ===

    def update_preference(self, field_name: str, value: int) -> int:
        """Set one preference, clamping durations to >= 0 and the cutoff to 0-23.

        Returns:
            The value actually stored
        """
        known = {f.name for f in fields(UserPreferences)}
        if field_name not in known:
            raise ScheduleError(f"Unknown preference: {field_name}")

        value = int(value)
        if field_name == 'cutoff_hour':
            stored = min(max(value, 0), 23)
        else:
            stored = max(value, 0)

        if stored != value:
            self.logger.warning(f"Preference {field_name}={value} clamped to {stored}")

        self.preferences = replace(self.preferences, **{field_name: stored})
        return stored

    # === Calculations ===

    def timeline_for_day(self, day_index: int, meal_selection: str = "none") -> CalculatedTimes:
        shift = self.shift_for_day(day_index)
        times = calculate_timeline(shift, self.preferences, meal_selection, self.rest_detection)
        self.logger.debug(f"Day {day_index} ({shift.name}, meal={meal_selection}): alarm {times.earliest_alarm}")
        return times

    def relevant_day(self, now: datetime, use_cutoff: bool = True) -> RelevantDay:
        if use_cutoff:
            return select_relevant_day(now, self.preferences.cutoff_hour, self.weekly_plan)
        return select_tomorrow(now, self.weekly_plan)

    def relevant_timeline(self, now: datetime, meal_selection: str = "none",
                          use_cutoff: bool = True) -> Tuple[RelevantDay, Shift, CalculatedTimes]:
        """Timeline for the day the user should be planning for right now."""
        day = self.relevant_day(now, use_cutoff)
        shift = self.shift_for_day(day.day_index)
        times = calculate_timeline(shift, self.preferences, meal_selection, self.rest_detection)
        self.logger.debug(f"Planning for {day.label} ({day.day_name}, {shift.name}): "
                          f"alarm {times.earliest_alarm}, leave {times.departure_time}")
        return day, shift, times

    def weekly_overview(self, meal_selection: str = "none") -> List[Tuple[int, Shift, CalculatedTimes]]:
        return [
            (day.day_index, self.shift_for_day(day.day_index),
             self.timeline_for_day(day.day_index, meal_selection))
            for day in self.weekly_plan
        ]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'shifts': [s.to_dict() for s in self.shifts],
            'preferences': self.preferences.to_dict(),
            'weekly_plan': self.weekly_plan.to_list(),
        }

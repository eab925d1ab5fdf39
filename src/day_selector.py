#!/usr/bin/env python3
"""Decides which day of the weekly plan the morning timeline is for."""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from shift_models import Shift, DailyPlan, RestDetection, REST_SHIFT_ID, WEEK_DAYS

# Stand-in when the plan says rest but the catalog holds no rest shift
BUILTIN_REST_SHIFT = Shift(id=REST_SHIFT_ID, name="Rest", start_time="00:00", end_time="00:00")


@dataclass(frozen=True)
class RelevantDay:
    day_index: int          # 0 (Mon) to 6 (Sun)
    is_today: bool
    shift_id: Optional[str] = None

    @property
    def label(self) -> str:
        return "today" if self.is_today else "tomorrow"

    @property
    def day_name(self) -> str:
        return WEEK_DAYS[self.day_index]


def _relevant_day(now: datetime, offset: int, weekly_plan: Optional[DailyPlan]) -> RelevantDay:
    # datetime.weekday() is already Monday=0
    day_index = (now.weekday() + offset) % 7
    shift_id = weekly_plan.shift_id_for(day_index) if weekly_plan is not None else None
    return RelevantDay(day_index=day_index, is_today=offset == 0, shift_id=shift_id)


def select_relevant_day(now: datetime, cutoff_hour: int,
                        weekly_plan: Optional[DailyPlan] = None) -> RelevantDay:
    """Pick today or tomorrow depending on the cutoff hour.

    Before the cutoff the user is still inside last night's planning window,
    so today's shift is the one to wake up for. From the cutoff on, tomorrow's.
    """
    offset = 0 if now.hour < cutoff_hour else 1
    return _relevant_day(now, offset, weekly_plan)


def select_tomorrow(now: datetime, weekly_plan: Optional[DailyPlan] = None) -> RelevantDay:
    """Fixed mode without a cutoff: always tomorrow."""
    return _relevant_day(now, 1, weekly_plan)


def find_shift(shifts: List[Shift], shift_id: Optional[str]) -> Optional[Shift]:
    for shift in shifts:
        if shift.id == shift_id:
            return shift
    return None


def resolve_shift(weekly_plan: DailyPlan, shifts: List[Shift], day_index: int,
                  rest_detection: Optional[RestDetection] = None) -> Shift:
    """Look up the shift assigned to a day.

    An empty assignment resolves to the rest shift. An id missing from the
    catalog falls back to the first shift in the catalog.
    """
    rest_detection = rest_detection or RestDetection()
    shift_id = weekly_plan.shift_id_for(day_index)

    if shift_id is None:
        rest = next((s for s in shifts if rest_detection.is_rest(s)), None)
        return rest or BUILTIN_REST_SHIFT

    shift = find_shift(shifts, shift_id)
    if shift is None:
        if not shifts:
            raise ValueError("Shift catalog is empty")
        return shifts[0]
    return shift

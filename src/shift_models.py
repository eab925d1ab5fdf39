#!/usr/bin/env python3
"""Data models for shifts, personal buffers and the weekly plan."""

from dataclasses import dataclass, fields, asdict
from typing import Dict, Any, List, Optional, Tuple

from time_utils import NOT_APPLICABLE, time_to_minutes, shift_duration

REST_SHIFT_ID = "off"

WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]

MEAL_SELECTIONS = ("none", "breakfast", "lunch")


@dataclass
class Shift:
    """A named work period. end_time may be earlier than start_time for night shifts."""

    id: str
    name: str
    start_time: str  # HH:MM
    end_time: str    # HH:MM

    @property
    def is_overnight(self) -> bool:
        return time_to_minutes(self.end_time) < time_to_minutes(self.start_time)

    @property
    def duration_minutes(self) -> int:
        return shift_duration(self.start_time, self.end_time)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


@dataclass
class UserPreferences:
    """Personal buffers in minutes plus the hour that decides today vs tomorrow."""

    snooze: int = 10         # time-in-bed after the first alarm
    wash_up: int = 20        # washing and dressing
    breakfast: int = 15
    lunch: int = 30
    commute: int = 40
    early_arrival: int = 10  # minutes before shift start to be on site
    cutoff_hour: int = 4     # 0-23

    @classmethod
    def duration_fields(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != "cutoff_hour")

    def meal_duration(self, meal_selection: Optional[str]) -> int:
        """Minutes reserved for the selected meal; anything but breakfast or lunch is no meal."""
        if meal_selection == "breakfast":
            return self.breakfast
        if meal_selection == "lunch":
            return self.lunch
        return 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


@dataclass
class SimplePreferences:
    """Reduced buffer set: one fixed meal duration and no snooze."""

    wash_up: int = 20
    meal: int = 20
    commute: int = 40
    early_arrival: int = 10

    @classmethod
    def from_preferences(cls, prefs: UserPreferences, meal_selection: str = "none") -> "SimplePreferences":
        return cls(
            wash_up=prefs.wash_up,
            meal=prefs.meal_duration(meal_selection),
            commute=prefs.commute,
            early_arrival=prefs.early_arrival,
        )


@dataclass
class DayAssignment:
    day_index: int                 # 0 (Mon) to 6 (Sun)
    shift_id: Optional[str] = None  # None means rest


@dataclass
class DailyPlan:
    """Seven day-to-shift assignments, Monday first."""

    days: List[DayAssignment]

    def __post_init__(self):
        if len(self.days) != 7:
            raise ValueError(f"A weekly plan needs exactly 7 days, got {len(self.days)}")
        for index, day in enumerate(self.days):
            if day.day_index != index:
                raise ValueError(f"Day {index} is out of order (found day_index={day.day_index})")

    def __getitem__(self, day_index: int) -> DayAssignment:
        return self.days[day_index]

    def __iter__(self):
        return iter(self.days)

    def shift_id_for(self, day_index: int) -> Optional[str]:
        return self.days[day_index].shift_id

    def to_list(self) -> List[Optional[str]]:
        return [day.shift_id for day in self.days]

    @classmethod
    def from_list(cls, shift_ids: List[Optional[str]]) -> "DailyPlan":
        return cls([DayAssignment(i, shift_id) for i, shift_id in enumerate(shift_ids)])


@dataclass(frozen=True)
class RestDetection:
    """How a shift is recognised as a rest day.

    The reserved id is authoritative. Matching on display names is only for
    catalogs saved before rest shifts carried the reserved id.
    """

    rest_id: str = REST_SHIFT_ID
    match_legacy_names: bool = False
    legacy_names: Tuple[str, ...] = ("休", "Rest", "Off")

    def is_rest(self, shift: Optional[Shift]) -> bool:
        if shift is None:
            return True
        if shift.id == self.rest_id:
            return True
        return self.match_legacy_names and shift.name in self.legacy_names


@dataclass(frozen=True)
class CalculatedTimes:
    """Checkpoint times for one day, earliest first."""

    earliest_alarm: str
    latest_wakeup: str
    departure_time: str
    arrival_area_time: str
    meeting_time: str
    work_start_time: str

    LABELS = {
        'earliest_alarm': "Earliest alarm",
        'latest_wakeup': "Latest wake-up",
        'departure_time': "Leave home",
        'arrival_area_time': "Arrive on site",
        'meeting_time': "Meeting",
        'work_start_time': "Shift start",
    }

    @classmethod
    def not_applicable(cls) -> "CalculatedTimes":
        return cls(*([NOT_APPLICABLE] * 6))

    @property
    def is_rest(self) -> bool:
        return self.work_start_time == NOT_APPLICABLE

    def checkpoints(self) -> List[Tuple[str, str]]:
        return [(self.LABELS[name], getattr(self, name)) for name in self.LABELS]

    def to_dict(self) -> Dict[str, str]:
        return {name: getattr(self, name) for name in self.LABELS}


@dataclass(frozen=True)
class SimpleTimes:
    alarm_time: str
    departure_time: str
    arrival_time: str

    @classmethod
    def not_applicable(cls) -> "SimpleTimes":
        return cls(NOT_APPLICABLE, NOT_APPLICABLE, NOT_APPLICABLE)

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


DEFAULT_SHIFTS: List[Dict[str, Any]] = [
    {'id': '1', 'name': 'Morning', 'start_time': '08:00', 'end_time': '17:00'},
    {'id': '2', 'name': 'Middle', 'start_time': '14:00', 'end_time': '22:00'},
    {'id': '3', 'name': 'Night', 'start_time': '19:00', 'end_time': '04:00'},
    {'id': REST_SHIFT_ID, 'name': 'Rest', 'start_time': '00:00', 'end_time': '00:00'},
]

# Mon-Fri morning, weekend rest
INITIAL_WEEKLY_PLAN: List[Optional[str]] = ['1', '1', '1', '1', '1', REST_SHIFT_ID, REST_SHIFT_ID]


def default_shifts() -> List[Shift]:
    return [Shift(**s) for s in DEFAULT_SHIFTS]


def default_plan() -> DailyPlan:
    return DailyPlan.from_list(list(INITIAL_WEEKLY_PLAN))

#!/usr/bin/env python3
"""YAML configuration loader with validation for the shift clock."""

import yaml
import os
import re
from pathlib import Path
from typing import Dict, Any, List, Optional
from dataclasses import dataclass, field, fields
from dotenv import load_dotenv

from time_utils import is_valid_time_string
from shift_models import (
    Shift, UserPreferences, DailyPlan, RestDetection,
    DEFAULT_SHIFTS, INITIAL_WEEKLY_PLAN, REST_SHIFT_ID,
)
from schedule_state import ScheduleState

# Load environment variables
load_dotenv()


def substitute_env_vars(obj):
    """Recursively substitute environment variables in strings."""
    if isinstance(obj, str):
        # Replace ${VAR_NAME} with environment variable value
        return re.sub(r'\$\{([^}]+)\}', lambda m: os.getenv(m.group(1), m.group(0)), obj)
    elif isinstance(obj, dict):
        return {k: substitute_env_vars(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [substitute_env_vars(item) for item in obj]
    else:
        return obj


@dataclass
class CalendarConfig:
    timezone: str = "UTC"
    output_dir: str = "./outputs/reminders/"
    reminder_duration: int = 5
    title_prefix: str = "Wake-up alarm"


@dataclass
class ShiftClockConfig:
    shifts: List[Shift]
    preferences: UserPreferences
    weekly_plan: DailyPlan
    rest_detection: RestDetection = field(default_factory=RestDetection)
    calendar: CalendarConfig = field(default_factory=CalendarConfig)

    def to_state(self) -> ScheduleState:
        return ScheduleState(
            shifts=self.shifts,
            preferences=self.preferences,
            weekly_plan=self.weekly_plan,
            rest_detection=self.rest_detection,
        )


def parse_shifts(shift_data: List[Dict[str, Any]]) -> List[Shift]:
    """Build the shift catalog, rejecting malformed entries."""
    if not shift_data:
        raise ValueError("At least one shift must be configured")

    shifts = []
    seen_ids = set()
    for entry in shift_data:
        missing = [k for k in ('id', 'name', 'start_time', 'end_time') if k not in entry]
        if missing:
            raise ValueError(f"Shift entry {entry!r} is missing: {', '.join(missing)}")

        shift = Shift(
            id=str(entry['id']),
            name=str(entry['name']),
            start_time=str(entry['start_time']),
            end_time=str(entry['end_time'])
        )
        if shift.id in seen_ids:
            raise ValueError(f"Duplicate shift id: {shift.id}")
        for value in (shift.start_time, shift.end_time):
            if not is_valid_time_string(value):
                raise ValueError(f"Shift '{shift.name}' has invalid time '{value}', expected HH:MM")

        seen_ids.add(shift.id)
        shifts.append(shift)

    return shifts


def parse_preferences(pref_data: Dict[str, Any]) -> UserPreferences:
    """Parse buffers; missing keys keep their defaults."""
    known = {f.name for f in fields(UserPreferences)}
    unknown = set(pref_data) - known
    if unknown:
        raise ValueError(f"Unknown preference(s): {', '.join(sorted(unknown))}")

    values = {k: int(v) for k, v in pref_data.items()}
    for name, value in values.items():
        if name != 'cutoff_hour' and value < 0:
            raise ValueError(f"Preference '{name}' must not be negative (got {value})")

    prefs = UserPreferences(**values)
    if not 0 <= prefs.cutoff_hour <= 23:
        raise ValueError(f"cutoff_hour must be between 0 and 23 (got {prefs.cutoff_hour})")
    return prefs


def parse_weekly_plan(plan_data: List[Optional[str]], shifts: List[Shift]) -> DailyPlan:
    """Parse the seven Monday-first shift ids (null for rest)."""
    if not isinstance(plan_data, list) or len(plan_data) != 7:
        raise ValueError("weekly_plan must list exactly 7 entries, Monday first")

    shift_ids = {s.id for s in shifts}
    plan = []
    for index, shift_id in enumerate(plan_data):
        if shift_id is not None:
            shift_id = str(shift_id)
            if shift_id not in shift_ids:
                raise ValueError(f"weekly_plan day {index} refers to unknown shift '{shift_id}'")
        plan.append(shift_id)

    return DailyPlan.from_list(plan)


def load_config(config_path: str) -> ShiftClockConfig:
    """Load and validate YAML configuration."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}
        data = substitute_env_vars(data)

    return parse_config(data)


def parse_config(data: Dict[str, Any]) -> ShiftClockConfig:
    """Turn a configuration mapping into typed config objects."""
    shifts = parse_shifts(data.get('shifts', DEFAULT_SHIFTS))
    preferences = parse_preferences(data.get('preferences', {}))
    weekly_plan = parse_weekly_plan(data.get('weekly_plan', list(INITIAL_WEEKLY_PLAN)), shifts)

    rest_data = data.get('rest_detection', {})
    rest_detection = RestDetection(
        rest_id=str(rest_data.get('rest_id', REST_SHIFT_ID)),
        match_legacy_names=bool(rest_data.get('match_legacy_names', False)),
        legacy_names=tuple(rest_data.get('legacy_names', RestDetection().legacy_names))
    )

    calendar_data = data.get('calendar', {})
    calendar = CalendarConfig(
        timezone=calendar_data.get('timezone', 'UTC'),
        output_dir=calendar_data.get('output_dir', CalendarConfig.output_dir),
        reminder_duration=int(calendar_data.get('reminder_duration', CalendarConfig.reminder_duration)),
        title_prefix=calendar_data.get('title_prefix', CalendarConfig.title_prefix)
    )

    return ShiftClockConfig(
        shifts=shifts,
        preferences=preferences,
        weekly_plan=weekly_plan,
        rest_detection=rest_detection,
        calendar=calendar
    )


def save_state(state: ScheduleState, config_path: str, calendar: Optional[CalendarConfig] = None) -> Path:
    """Write the current schedule back to a YAML file."""
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = state.to_dict()
    data['rest_detection'] = {
        'rest_id': state.rest_detection.rest_id,
        'match_legacy_names': state.rest_detection.match_legacy_names,
        'legacy_names': list(state.rest_detection.legacy_names)
    }
    calendar = calendar or CalendarConfig()
    data['calendar'] = {
        'timezone': calendar.timezone,
        'output_dir': calendar.output_dir,
        'reminder_duration': calendar.reminder_duration,
        'title_prefix': calendar.title_prefix
    }

    with open(config_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False, indent=2, allow_unicode=True)

    return config_path


def create_default_config() -> Dict[str, Any]:
    """Create a default configuration template."""
    return {
        'shifts': [dict(s) for s in DEFAULT_SHIFTS],
        'preferences': UserPreferences().to_dict(),
        'weekly_plan': list(INITIAL_WEEKLY_PLAN),
        'rest_detection': {
            'rest_id': REST_SHIFT_ID,
            'match_legacy_names': False
        },
        'calendar': {
            'timezone': 'America/Denver',
            'output_dir': './outputs/reminders/',
            'reminder_duration': 5,
            'title_prefix': 'Wake-up alarm'
        }
    }

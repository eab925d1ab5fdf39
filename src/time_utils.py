#!/usr/bin/env python3
"""Shared wall-clock utilities for the shift clock."""

import re
from datetime import datetime, time

MINUTES_PER_DAY = 24 * 60
NOT_APPLICABLE = "--:--"

_TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}$")


def parse_time_string(time_str: str) -> time:
    """Parse time string in HH:MM format to time object."""
    return datetime.strptime(time_str, "%H:%M").time()


def is_valid_time_string(time_str: str) -> bool:
    """Check that a value is a 24-hour HH:MM string."""
    if not isinstance(time_str, str) or not _TIME_PATTERN.match(time_str):
        return False
    try:
        parse_time_string(time_str)
    except ValueError:
        return False
    return True


def time_to_minutes(time_str: str) -> int:
    """Convert an HH:MM string to total minutes since midnight.

    Raises ValueError when the string is not two colon-separated integers.
    """
    parts = time_str.split(":")
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM, got {time_str!r}")
    hours, minutes = map(int, parts)
    return hours * 60 + minutes


def minutes_to_time(total_minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded HH:MM string.

    Values outside a single day wrap in both directions, so -10 becomes
    23:50 and 1450 becomes 00:10. Which day the value belonged to is lost.
    """
    minutes = total_minutes
    while minutes < 0:
        minutes += MINUTES_PER_DAY
    minutes %= MINUTES_PER_DAY
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def shift_duration(start_time: str, end_time: str) -> int:
    """Calculate shift length in minutes, handling midnight crossover."""
    start_minutes = time_to_minutes(start_time)
    end_minutes = time_to_minutes(end_time)

    # If end time is before start time, it crosses midnight
    if end_minutes <= start_minutes:
        end_minutes += MINUTES_PER_DAY

    return end_minutes - start_minutes

#!/usr/bin/env python3
"""Morning timeline calculation: works backwards from shift start to the first alarm."""

from typing import Dict, Optional

from time_utils import time_to_minutes, minutes_to_time
from shift_models import (
    Shift, UserPreferences, SimplePreferences, RestDetection,
    CalculatedTimes, SimpleTimes,
)

_DEFAULT_REST_DETECTION = RestDetection()


def checkpoint_minutes(shift: Shift, prefs: UserPreferences,
                       meal_selection: Optional[str] = "none") -> Dict[str, int]:
    """Return the un-normalized checkpoint chain, earliest first.

    Values may be negative when a checkpoint falls on the previous day.
    Each step subtracts from the one before it, in this order: early arrival,
    meal, commute, wash-up, snooze.
    """
    start = time_to_minutes(shift.start_time)
    meal = prefs.meal_duration(meal_selection)

    meeting = start - prefs.early_arrival
    arrival_area = meeting - meal
    departure = arrival_area - prefs.commute
    latest_wakeup = departure - prefs.wash_up
    earliest_alarm = latest_wakeup - prefs.snooze

    return {
        'earliest_alarm': earliest_alarm,
        'latest_wakeup': latest_wakeup,
        'departure_time': departure,
        'arrival_area_time': arrival_area,
        'meeting_time': meeting,
        'work_start_time': start,
    }


def calculate_timeline(shift: Shift, prefs: UserPreferences, meal_selection: Optional[str] = "none",
                       rest_detection: Optional[RestDetection] = None) -> CalculatedTimes:
    """Calculate the morning checkpoints for a shift.

    Args:
        shift: The shift worked that day
        prefs: Personal buffers; durations are assumed to be >= 0
        meal_selection: 'breakfast' or 'lunch'; anything else means no meal
        rest_detection: How to recognise a rest shift (reserved id by default)

    Returns:
        CalculatedTimes with HH:MM values, or '--:--' everywhere on a rest day
    """
    if (rest_detection or _DEFAULT_REST_DETECTION).is_rest(shift):
        return CalculatedTimes.not_applicable()

    chain = checkpoint_minutes(shift, prefs, meal_selection)

    return CalculatedTimes(
        earliest_alarm=minutes_to_time(chain['earliest_alarm']),
        latest_wakeup=minutes_to_time(chain['latest_wakeup']),
        departure_time=minutes_to_time(chain['departure_time']),
        arrival_area_time=minutes_to_time(chain['arrival_area_time']),
        meeting_time=minutes_to_time(chain['meeting_time']),
        work_start_time=shift.start_time,
    )


def calculate_simple_timeline(shift: Shift, prefs: SimplePreferences,
                              rest_detection: Optional[RestDetection] = None) -> SimpleTimes:
    """Three-checkpoint variant with a fixed meal and no snooze."""
    if (rest_detection or _DEFAULT_REST_DETECTION).is_rest(shift):
        return SimpleTimes.not_applicable()

    arrival = time_to_minutes(shift.start_time) - prefs.early_arrival
    departure = arrival - prefs.commute
    alarm = departure - (prefs.meal + prefs.wash_up)

    return SimpleTimes(
        alarm_time=minutes_to_time(alarm),
        departure_time=minutes_to_time(departure),
        arrival_time=minutes_to_time(arrival),
    )

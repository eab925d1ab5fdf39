"""Tests for guarded edits to the schedule state."""

import logging
from datetime import datetime

import pytest

from shift_models import Shift, UserPreferences, default_plan
from schedule_state import ScheduleState, ScheduleError


@pytest.fixture
def state():
    return ScheduleState()


class TestPreferences:
    def test_negative_duration_clamps_to_zero(self, state):
        for name in UserPreferences.duration_fields():
            assert state.update_preference(name, -15) == 0
            assert getattr(state.preferences, name) == 0

    def test_no_upper_bound(self, state):
        assert state.update_preference('commute', 500) == 500

    def test_cutoff_hour_clamped(self, state):
        assert state.update_preference('cutoff_hour', -1) == 0
        assert state.update_preference('cutoff_hour', 30) == 23
        assert state.update_preference('cutoff_hour', 6) == 6

    def test_unknown_field(self, state):
        with pytest.raises(ScheduleError):
            state.update_preference('nap', 10)


class TestShiftCatalog:
    def test_add_shift(self, state):
        shift = state.add_shift()
        assert shift in state.shifts
        assert (shift.name, shift.start_time, shift.end_time) == ("New shift", "09:00", "18:00")

    def test_added_ids_are_unique(self, state):
        ids = {state.add_shift().id for _ in range(5)}
        assert len(ids) == 5

    def test_add_rejects_bad_time(self, state):
        with pytest.raises(ScheduleError):
            state.add_shift("Broken", "9am", "18:00")

    def test_update_shift(self, state):
        updated = state.update_shift('2', start_time='13:30', name='Afternoon')
        assert updated.start_time == '13:30'
        assert state.get_shift('2').name == 'Afternoon'

    def test_update_rejects_bad_time(self, state):
        with pytest.raises(ScheduleError):
            state.update_shift('2', end_time='25:00')
        assert state.get_shift('2').end_time == '22:00'

    def test_update_cannot_change_id(self, state):
        with pytest.raises(ScheduleError):
            state.update_shift('2', id='x')

    def test_delete_shift_clears_plan_days(self, state):
        state.delete_shift('1')
        assert all(s.id != '1' for s in state.shifts)
        assert state.weekly_plan.to_list()[:5] == [None] * 5
        assert state.timeline_for_day(0).is_rest

    def test_cannot_delete_rest_shift(self, state):
        with pytest.raises(ScheduleError):
            state.delete_shift('off')
        assert any(s.id == 'off' for s in state.shifts)

    def test_cannot_delete_last_shift(self):
        only = Shift(id='1', name='Morning', start_time='08:00', end_time='17:00')
        state = ScheduleState(shifts=[only])
        with pytest.raises(ScheduleError):
            state.delete_shift('1')

    def test_cannot_delete_last_working_shift(self, state):
        state.delete_shift('2')
        state.delete_shift('3')
        with pytest.raises(ScheduleError):
            state.delete_shift('1')

    def test_unknown_shift(self, state):
        with pytest.raises(ScheduleError):
            state.delete_shift('missing')

    def test_empty_catalog_rejected(self):
        with pytest.raises(ScheduleError):
            ScheduleState(shifts=[])


class TestWeeklyPlan:
    def test_assign_shift(self, state):
        state.assign_shift(5, '3')
        assert state.shift_for_day(5).name == 'Night'

    def test_assign_rest(self, state):
        state.assign_shift(0, None)
        assert state.timeline_for_day(0).is_rest

    def test_assign_validates(self, state):
        with pytest.raises(ScheduleError):
            state.assign_shift(7, '1')
        with pytest.raises(ScheduleError):
            state.assign_shift(0, 'missing')

    def test_caller_plan_is_copied(self):
        plan = default_plan()
        state = ScheduleState(weekly_plan=plan)
        state.assign_shift(0, '3')
        state.delete_shift('1')
        assert plan.to_list() == default_plan().to_list()
        assert state.weekly_plan[0].shift_id == '3'


class TestCalculations:
    def test_relevant_timeline(self, state):
        # Tuesday 21:00, past the 04:00 cutoff, plans for Wednesday's morning shift
        day, shift, times = state.relevant_timeline(datetime(2025, 1, 14, 21, 0))
        assert day.day_index == 2
        assert shift.id == '1'
        assert times.work_start_time == '08:00'
        # 08:00 - 10 early - 40 commute - 20 wash - 10 snooze
        assert times.earliest_alarm == '06:40'

    def test_relevant_timeline_without_cutoff(self, state):
        day, _, _ = state.relevant_timeline(datetime(2025, 1, 15, 2, 0), use_cutoff=False)
        assert day.day_index == 3

    def test_relevant_timeline_on_friday_night(self, state):
        day, shift, times = state.relevant_timeline(datetime(2025, 1, 17, 22, 0))
        assert day.day_name == 'Saturday'
        assert times.is_rest

    def test_weekly_overview(self, state):
        overview = state.weekly_overview("breakfast")
        assert [day for day, _, _ in overview] == list(range(7))
        assert overview[0][2].arrival_area_time == '07:35'
        assert overview[6][2].is_rest


class TestCalculationLogging:
    @pytest.fixture
    def records(self, state):
        collected = []

        class ListHandler(logging.Handler):
            def emit(self, record):
                collected.append(record)

        handler = ListHandler(level=logging.DEBUG)
        previous = state.logger.level
        state.logger.setLevel(logging.DEBUG)
        state.logger.addHandler(handler)
        yield collected
        state.logger.removeHandler(handler)
        state.logger.setLevel(previous)

    def test_day_timeline_logged_at_debug(self, state, records):
        state.timeline_for_day(0)
        assert [r.levelno for r in records] == [logging.DEBUG]
        assert '06:40' in records[0].getMessage()

    def test_relevant_timeline_logged_at_debug(self, state, records):
        state.relevant_timeline(datetime(2025, 1, 14, 21, 0))
        assert any(r.levelno == logging.DEBUG and 'Wednesday' in r.getMessage() for r in records)

#!/usr/bin/env python3
"""
Shift Clock API
JSON endpoints over the schedule state and timeline calculations.
"""

import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, HTTPException, Query, Request, Response
from pydantic import BaseModel

sys.path.append(str(Path(__file__).parent / 'src'))

from config_loader import CalendarConfig, load_config, save_state
from logging_config import setup_logger
from schedule_state import ScheduleState, ScheduleError
from shift_models import CalculatedTimes, WEEK_DAYS
from calendar_generator import ReminderExporter

logger = setup_logger('timeline_api')

MEAL_PATTERN = "^(none|breakfast|lunch)$"


class ShiftIn(BaseModel):
    name: str = "New shift"
    start_time: str = "09:00"
    end_time: str = "18:00"


class ShiftPatch(BaseModel):
    name: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None


class Assignment(BaseModel):
    shift_id: Optional[str] = None


class PreferenceValue(BaseModel):
    value: int


def _state(request: Request) -> ScheduleState:
    return request.app.state.schedule


def _save(request: Request) -> None:
    """Write the schedule back to the config file the app was loaded from."""
    config_path = request.app.state.config_path
    if config_path:
        save_state(_state(request), config_path, request.app.state.calendar)
        logger.debug(f"Saved schedule to {config_path}")


def create_app(state: Optional[ScheduleState] = None,
               calendar: Optional[CalendarConfig] = None,
               config_path: Optional[str] = None) -> FastAPI:
    """Build the API around an explicit schedule state.

    Without a state, the one in config_path (or SHIFT_CLOCK_CONFIG) is loaded.
    Successful edits are written back to that file.
    """
    if state is None:
        config_path = config_path or os.getenv('SHIFT_CLOCK_CONFIG')
        if config_path:
            config = load_config(config_path)
            state, calendar = config.to_state(), config.calendar
        else:
            state = ScheduleState()

    app = FastAPI(title="Shift Clock API", version="1.0")
    app.state.schedule = state
    app.state.calendar = calendar
    app.state.config_path = config_path
    app.state.exporter = ReminderExporter(calendar)

    @app.get("/timeline/relevant")
    def relevant_timeline(request: Request, meal: str = Query("none", pattern=MEAL_PATTERN),
                          now: Optional[datetime] = None, use_cutoff: bool = True):
        """⏰ Timeline for the day being planned right now"""
        now = now or datetime.now(request.app.state.exporter.timezone)
        day, shift, times = _state(request).relevant_timeline(now, meal, use_cutoff)
        return {
            'day_index': day.day_index,
            'day_name': day.day_name,
            'label': day.label,
            'is_today': day.is_today,
            'shift': shift.to_dict(),
            'times': times.to_dict(),
        }

    @app.get("/timeline/day/{day_index}")
    def day_timeline(request: Request, day_index: int,
                     meal: str = Query("none", pattern=MEAL_PATTERN)):
        if not 0 <= day_index <= 6:
            raise HTTPException(status_code=404, detail=f"No day {day_index}")
        state = _state(request)
        return {
            'day_index': day_index,
            'day_name': WEEK_DAYS[day_index],
            'shift': state.shift_for_day(day_index).to_dict(),
            'times': state.timeline_for_day(day_index, meal).to_dict(),
        }

    @app.get("/plan")
    def weekly_plan(request: Request, meal: str = Query("none", pattern=MEAL_PATTERN)):
        """📅 All seven days with their shifts and alarm times"""
        return [
            {'day_index': i, 'day_name': WEEK_DAYS[i], 'shift': shift.to_dict(), 'times': times.to_dict()}
            for i, shift, times in _state(request).weekly_overview(meal)
        ]

    @app.put("/plan/{day_index}")
    def assign_day(request: Request, day_index: int, body: Assignment):
        try:
            _state(request).assign_shift(day_index, body.shift_id)
        except ScheduleError as e:
            raise HTTPException(status_code=400, detail=str(e))
        _save(request)
        return {'day_index': day_index, 'shift_id': body.shift_id}

    @app.get("/shifts")
    def list_shifts(request: Request):
        return [s.to_dict() for s in _state(request).shifts]

    @app.post("/shifts", status_code=201)
    def add_shift(request: Request, body: ShiftIn):
        try:
            shift = _state(request).add_shift(body.name, body.start_time, body.end_time)
        except ScheduleError as e:
            raise HTTPException(status_code=400, detail=str(e))
        _save(request)
        return shift.to_dict()

    @app.patch("/shifts/{shift_id}")
    def update_shift(request: Request, shift_id: str, body: ShiftPatch):
        state = _state(request)
        if all(s.id != shift_id for s in state.shifts):
            raise HTTPException(status_code=404, detail=f"Unknown shift {shift_id}")
        changes = {k: v for k, v in body.model_dump().items() if v is not None}
        try:
            shift = state.update_shift(shift_id, **changes)
        except ScheduleError as e:
            raise HTTPException(status_code=400, detail=str(e))
        _save(request)
        return shift.to_dict()

    @app.delete("/shifts/{shift_id}", status_code=204)
    def delete_shift(request: Request, shift_id: str):
        state = _state(request)
        if all(s.id != shift_id for s in state.shifts):
            raise HTTPException(status_code=404, detail=f"Unknown shift {shift_id}")
        try:
            state.delete_shift(shift_id)
        except ScheduleError as e:
            raise HTTPException(status_code=400, detail=str(e))
        _save(request)
        return Response(status_code=204)

    @app.get("/preferences")
    def get_preferences(request: Request):
        return _state(request).preferences.to_dict()

    @app.put("/preferences/{field}")
    def update_preference(request: Request, field: str, body: PreferenceValue):
        try:
            stored = _state(request).update_preference(field, body.value)
        except ScheduleError as e:
            raise HTTPException(status_code=400, detail=str(e))
        _save(request)
        return {'field': field, 'value': stored}

    @app.get("/reminder/{checkpoint}")
    def reminder(request: Request, checkpoint: str, meal: str = Query("none", pattern=MEAL_PATTERN),
                 now: Optional[datetime] = None):
        """🔔 Calendar file for one checkpoint of the relevant day"""
        if checkpoint not in CalculatedTimes.LABELS:
            raise HTTPException(status_code=404, detail=f"Unknown checkpoint {checkpoint}")

        exporter = request.app.state.exporter
        now = now or datetime.now(exporter.timezone)
        _, _, times = _state(request).relevant_timeline(now, meal)
        if times.is_rest:
            raise HTTPException(status_code=400, detail="Rest day, nothing to remind about")

        value = getattr(times, checkpoint)
        content = exporter.export_reminder(value, CalculatedTimes.LABELS[checkpoint], now)
        filename = exporter.reminder_filename(value)
        logger.info(f"Serving reminder {filename}")
        return Response(
            content=content,
            media_type="text/calendar; charset=utf-8",
            headers={'Content-Disposition': f'attachment; filename="{filename}"'}
        )

    return app


app = create_app()

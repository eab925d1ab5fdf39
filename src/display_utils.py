#!/usr/bin/env python3
"""Console output for timelines using the rich library."""

from typing import List, Optional, Tuple

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from shift_models import Shift, CalculatedTimes, SimpleTimes, WEEK_DAYS
from day_selector import RelevantDay


class TimelineDisplay:
    """Renders calculated checkpoints to the terminal."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def show_day(self, day: RelevantDay, shift: Shift, times: CalculatedTimes):
        title = f"{day.label.title()} ({day.day_name}): {shift.name}"
        if times.is_rest:
            self.console.print(Panel("Rest day, no alarm needed 🛌", title=title, style="green"))
            return

        table = Table(show_header=False, box=None)
        table.add_column("Checkpoint", style="cyan")
        table.add_column("Time", style="bold")
        for label, value in times.checkpoints():
            table.add_row(label, value)

        subtitle = f"Shift {shift.start_time}-{shift.end_time}"
        if shift.is_overnight:
            subtitle += " (+1 day)"
        self.console.print(Panel(table, title=title, subtitle=subtitle))

    def show_simple(self, day: RelevantDay, shift: Shift, times: SimpleTimes):
        title = f"{day.label.title()} ({day.day_name}): {shift.name}"
        table = Table(show_header=False, box=None)
        table.add_row("Alarm", times.alarm_time)
        table.add_row("Leave home", times.departure_time)
        table.add_row("On site", times.arrival_time)
        self.console.print(Panel(table, title=title))

    def show_week(self, overview: List[Tuple[int, Shift, CalculatedTimes]]):
        table = Table(title="Weekly plan")
        table.add_column("Day")
        table.add_column("Shift")
        table.add_column("Start")
        table.add_column("Alarm", style="yellow")
        table.add_column("Leave", style="blue")

        for day_index, shift, times in overview:
            table.add_row(WEEK_DAYS[day_index], shift.name, times.work_start_time,
                          times.earliest_alarm, times.departure_time)

        self.console.print(table)

    def show_issues(self, issues: List[str]):
        self.console.print("[bold yellow]Configuration Issues:[/bold yellow]")
        for issue in issues:
            self.console.print(f"  - {issue}")

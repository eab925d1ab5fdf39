#!/usr/bin/env python3
"""
Shift Clock - Main CLI Interface
Works out when to set the alarm and leave home for the next shift.
"""

import sys
import argparse
import yaml
import signal
from pathlib import Path
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

# Add src directory to path for imports
sys.path.append(str(Path(__file__).parent / 'src'))

from config_loader import load_config, create_default_config
from logging_config import setup_logger, set_global_logging_level, get_logging_level_from_env
from shift_models import CalculatedTimes, SimplePreferences, MEAL_SELECTIONS
from timeline_calculator import calculate_simple_timeline
from calendar_generator import ReminderExporter
from display_utils import TimelineDisplay

logger = setup_logger('shift_clock')


def create_default_template(output_path: str):
    """Create a default YAML configuration template."""
    with open(output_path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(create_default_config(), f, default_flow_style=False, sort_keys=False, indent=2)

    logger.info(f"Default configuration template created: {output_path}")
    logger.info(f"Edit it and run: python shift_clock.py {output_path}")


def validate_configuration(config):
    """Return non-fatal issues worth showing before calculating."""
    issues = []
    state = config.to_state()

    if not any(s for s in state.shifts if state.rest_detection.is_rest(s)):
        issues.append(f"No rest shift with id '{state.rest_detection.rest_id}' in the catalog")

    working_days = [d for d in range(7) if not state.rest_detection.is_rest(state.shift_for_day(d))]
    if not working_days:
        issues.append("Weekly plan has no working days")

    prefs = state.preferences
    total = prefs.early_arrival + max(prefs.breakfast, prefs.lunch) + prefs.commute + prefs.wash_up + prefs.snooze
    if total >= 12 * 60:
        issues.append(f"Buffers add up to {total} minutes; alarm times will wrap by half a day or more")

    if config.calendar.timezone and config.calendar.timezone != 'UTC':
        try:
            ZoneInfo(config.calendar.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            issues.append(f"Unknown timezone '{config.calendar.timezone}', UTC will be used")

    return issues


def resolve_now(now_arg: str, timezone: str) -> datetime:
    try:
        tz = ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError):
        tz = ZoneInfo("UTC")

    if not now_arg:
        return datetime.now(tz)
    now = datetime.fromisoformat(now_arg)
    return now if now.tzinfo else now.replace(tzinfo=tz)


def run(args) -> bool:
    logger.info(f"Loading configuration from: {args.config_file}")
    try:
        config = load_config(args.config_file)
    except (FileNotFoundError, ValueError, yaml.YAMLError) as e:
        logger.error(f"Error loading configuration: {str(e)}")
        return False

    display = TimelineDisplay()
    issues = validate_configuration(config)

    if args.validate_only:
        if issues:
            display.show_issues(issues)
        else:
            logger.info("✅ Configuration is valid")
        return True

    if issues:
        display.show_issues(issues)

    state = config.to_state()
    try:
        now = resolve_now(args.now, config.calendar.timezone)
    except ValueError:
        logger.error(f"Invalid --now value '{args.now}', expected an ISO date and time like 2025-01-14T21:00")
        return False
    exporter = ReminderExporter(config.calendar)

    if args.week:
        display.show_week(state.weekly_overview(args.meal))

    day, shift, times = state.relevant_timeline(now, args.meal, use_cutoff=not args.tomorrow)

    if args.simple:
        simple_prefs = SimplePreferences.from_preferences(state.preferences, args.meal)
        display.show_simple(day, shift, calculate_simple_timeline(shift, simple_prefs, state.rest_detection))
    else:
        display.show_day(day, shift, times)

    if args.export:
        value = getattr(times, args.export)
        if times.is_rest:
            logger.warning("Rest day, no reminder exported")
        else:
            path = exporter.save_reminder(value, CalculatedTimes.LABELS[args.export], now)
            logger.info(f"📅 Reminder file: {path}")

    if args.export_week:
        week_start = (now - timedelta(days=now.weekday())).date()
        output_dir = Path(config.calendar.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / f"week_{week_start.isoformat()}.ics"
        with open(path, 'wb') as f:
            f.write(exporter.export_week(state, week_start, args.meal))
        logger.info(f"📅 Weekly alarm calendar: {path}")

    return True


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Shift Clock - work out alarm and departure times for your next shift",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Create default template
  python shift_clock.py --template my_shifts.yml

  # Show the timeline for the shift you are planning for now
  python shift_clock.py my_shifts.yml --meal breakfast

  # Export the earliest alarm as a calendar reminder
  python shift_clock.py my_shifts.yml --export earliest_alarm
        """
    )

    parser.add_argument("config_file", nargs="?", help="YAML configuration file path")
    parser.add_argument("--template", help="Create a default configuration template at specified path")
    parser.add_argument("--validate-only", action="store_true",
                        help="Only validate configuration without calculating")
    parser.add_argument("--meal", choices=MEAL_SELECTIONS, default="none",
                        help="Meal to fit in before the shift")
    parser.add_argument("--now", help="Pretend the current time is this ISO datetime")
    parser.add_argument("--tomorrow", action="store_true",
                        help="Always plan for tomorrow, ignoring the cutoff hour")
    parser.add_argument("--simple", action="store_true",
                        help="Show only alarm, departure and arrival")
    parser.add_argument("--week", action="store_true", help="Also show the whole weekly plan")
    parser.add_argument("--export", choices=list(CalculatedTimes.LABELS),
                        help="Write a calendar reminder for this checkpoint")
    parser.add_argument("--export-week", action="store_true",
                        help="Write a calendar with this week's earliest alarms")

    args = parser.parse_args()

    if args.template:
        create_default_template(args.template)
        return

    if not args.config_file:
        parser.print_help()
        print("\nError: Configuration file required")
        sys.exit(1)

    success = run(args)
    sys.exit(0 if success else 1)


def signal_handler(signum, frame):
    """Handle Ctrl+C gracefully."""
    print("\n\n🛑 Operation cancelled by user")
    sys.exit(1)


if __name__ == "__main__":
    signal.signal(signal.SIGINT, signal_handler)
    set_global_logging_level(get_logging_level_from_env())
    main()

"""
Text formatting utilities for Discord embeds and messages.

Provides functions for formatting air times, report dates and field values.
"""

import datetime
import random

from config import UNKNOWN_TIME_MARKER, EMBED_FIELD_VALUE_LIMIT, REPORT_COLOR_RANGE

_DATE_PATTERNS = {
    'YMD': '%Y-%m-%d',
    'DMY': '%d-%m-%Y',
    'MDY': '%m-%d-%Y',
}


def is_unknown_time(moment: datetime.datetime) -> bool:
    """Provider placeholder: exactly midnight means the air time is unknown"""
    return moment.hour == 0 and moment.minute == 0


def format_air_time(moment: datetime.datetime) -> str:
    """Format a zone-local air time as HH:MM, or ??? when unknown

    Examples:
        12:30 -> "12:30"
        00:00 -> "???"
    """
    if is_unknown_time(moment):
        return UNKNOWN_TIME_MARKER
    return moment.strftime('%H:%M')


def format_episode_line(number: int, moment: datetime.datetime) -> str:
    return f"- Ep {number} @ {format_air_time(moment)}\n"


def format_report_date(day: datetime.date, date_format: str = 'YMD') -> str:
    """Format the report day per display token

    Examples:
        format_report_date(date(2024, 5, 1), 'YMD') -> "2024-05-01"
        format_report_date(date(2024, 5, 1), 'DMY') -> "01-05-2024"
        format_report_date(date(2024, 5, 1), 'MDY') -> "05-01-2024"
    """
    pattern = _DATE_PATTERNS.get((date_format or '').upper(), _DATE_PATTERNS['YMD'])
    return day.strftime(pattern)


def truncate_field_value(value: str, limit: int = EMBED_FIELD_VALUE_LIMIT) -> str:
    """Cut a field value to Discord's limit, marking the cut with ..."""
    if len(value) <= limit:
        return value
    return value[:limit - 3] + "..."


def random_report_color() -> int:
    return random.randrange(REPORT_COLOR_RANGE)

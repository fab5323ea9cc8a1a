"""
Time context resolution - turns "now" into a target day in a time zone.
"""

import datetime
from typing import Optional

import pytz

from config import config
from models.schedule import TimeContext
from utils.error_handling import InvalidTimeZone

DATE_FORMATS = ('DMY', 'MDY', 'YMD')


def is_date_format(token: Optional[str]) -> bool:
    """True if token is one of DMY/MDY/YMD (any case)"""
    return bool(token) and token.upper() in DATE_FORMATS


def normalize_date_format(token: Optional[str]) -> str:
    """Upper-cased format token, or the configured default when unrecognized"""
    if is_date_format(token):
        return token.upper()
    if is_date_format(config.DEFAULT_DATE_FORMAT):
        return config.DEFAULT_DATE_FORMAT
    return 'YMD'


def get_timezone(name: Optional[str] = None):
    """Look up a pytz zone, raising InvalidTimeZone for unknown identifiers"""
    name = name or config.DEFAULT_TIMEZONE
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        raise InvalidTimeZone(name)


def resolve_time_context(timezone: Optional[str] = None,
                         date_format: Optional[str] = None,
                         now: Optional[datetime.datetime] = None) -> TimeContext:
    """Resolve the target calendar day for a request

    Args:
        timezone: IANA zone identifier, defaults to config.DEFAULT_TIMEZONE
        date_format: DMY, MDY or YMD (case-insensitive)
        now: Current instant; naive values are taken as UTC

    Returns:
        TimeContext for the zone-local day of `now`

    Raises:
        InvalidTimeZone: timezone is not in the zone database
    """
    tz = get_timezone(timezone)

    if now is None:
        now = datetime.datetime.now(pytz.UTC)
    elif now.tzinfo is None:
        now = pytz.UTC.localize(now)

    local_now = now.astimezone(tz)
    return TimeContext(
        timezone=tz.zone,
        year=local_now.year,
        month=local_now.month,
        day=local_now.day,
        date_format=normalize_date_format(date_format),
    )

"""Utils package - Utility functions and helpers"""

from .error_handling import (
    log_error,
    is_retryable_error,
    get_logger,
    AnimeBotError,
    InvalidTimeZone,
    InvalidInterval,
    NoServerContext,
    DuplicateRecurringJob,
    UpstreamUnavailable,
    DeliveryFailure,
)
from .formatting import (
    format_air_time,
    format_episode_line,
    format_report_date,
    truncate_field_value,
    random_report_color,
)
from .time_context import resolve_time_context, is_date_format, get_timezone

__all__ = [
    'log_error',
    'is_retryable_error',
    'get_logger',
    'AnimeBotError',
    'InvalidTimeZone',
    'InvalidInterval',
    'NoServerContext',
    'DuplicateRecurringJob',
    'UpstreamUnavailable',
    'DeliveryFailure',
    'format_air_time',
    'format_episode_line',
    'format_report_date',
    'truncate_field_value',
    'random_report_color',
    'resolve_time_context',
    'is_date_format',
    'get_timezone',
]

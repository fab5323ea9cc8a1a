"""Managers package - Schedule report and recurring update managers"""

from .schedule_manager import (
    fetch_calendar,
    parse_calendar_payload,
    aggregate_episodes,
    compare_groups,
    rank_groups,
    build_schedule_embeds,
    safe_send,
    send_todays_anime,
)
from .update_registry import UpdateRegistry, RecurringJob, parse_interval

__all__ = [
    'fetch_calendar',
    'parse_calendar_payload',
    'aggregate_episodes',
    'compare_groups',
    'rank_groups',
    'build_schedule_embeds',
    'safe_send',
    'send_todays_anime',
    'UpdateRegistry',
    'RecurringJob',
    'parse_interval',
]

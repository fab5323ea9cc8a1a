"""Models package - Core data structures"""

from .schedule import Episode, Series, SeriesGroup, TimeContext

__all__ = [
    'Episode',
    'Series',
    'SeriesGroup',
    'TimeContext',
]

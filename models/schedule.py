"""
Schedule data models - episodes, series and the per-request time context.
"""

import datetime
from dataclasses import dataclass, field
from typing import List

import pytz


@dataclass(frozen=True)
class Episode:
    """One airing of a series"""
    series_id: int
    number: int
    air_time: datetime.datetime  # timezone-aware

    def in_zone(self, tz) -> "Episode":
        """Same episode with air_time converted to tz"""
        return Episode(self.series_id, self.number, self.air_time.astimezone(tz))


@dataclass(frozen=True)
class Series:
    """A show, as listed by the calendar provider"""
    series_id: int
    title: str


@dataclass
class SeriesGroup:
    """Episodes of one series airing on the target day"""
    series_id: int
    title: str
    episodes: List[Episode] = field(default_factory=list)


@dataclass(frozen=True)
class TimeContext:
    """Time zone and calendar day governing one schedule request"""
    timezone: str
    year: int
    month: int
    day: int
    date_format: str = 'YMD'

    @property
    def tzinfo(self):
        return pytz.timezone(self.timezone)

    @property
    def target_date(self) -> datetime.date:
        return datetime.date(self.year, self.month, self.day)

    @property
    def month_param(self) -> str:
        """Two-digit, 1-based month used in provider queries"""
        return f"{self.month:02d}"

    @property
    def api_date_param(self) -> str:
        return f"{self.month_param}-{self.year:04d}"

    def is_target_day(self, moment: datetime.datetime) -> bool:
        """True if moment falls on the target day in this zone"""
        return moment.astimezone(self.tzinfo).date() == self.target_date

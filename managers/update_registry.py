"""
Recurring update registry.

Tracks one recurring schedule job per (guild, channel). Jobs are
discord.ext.tasks loops that re-run the on-demand report on every tick.
State is kept in memory only and is gone after a restart.
"""

import asyncio
import math
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, List, Optional

from discord.ext import tasks

from config import config
from utils.error_handling import (
    DuplicateRecurringJob,
    InvalidInterval,
    NoServerContext,
    get_logger,
    log_error,
)
from utils.time_context import get_timezone

log = get_logger('registry')

ReportCallback = Callable[..., Awaitable[object]]


@dataclass
class RecurringJob:
    """A standing per-channel update"""
    guild_id: int
    channel_id: int
    interval_ms: float
    timezone: Optional[str]
    date_format: Optional[str]
    loop: tasks.Loop = None

    @property
    def interval_seconds(self) -> float:
        return self.interval_ms / 1000

    def is_running(self) -> bool:
        return self.loop is not None and self.loop.is_running()

    def cancel(self):
        if self.loop is not None:
            self.loop.cancel()


def parse_interval(value) -> float:
    """Parse an interval in milliseconds

    Args:
        value: Number or numeric string; None gives the configured default

    Raises:
        InvalidInterval: not a finite positive number
    """
    if value is None:
        return float(config.DEFAULT_UPDATE_INTERVAL_MS)
    try:
        interval = float(value)
    except (TypeError, ValueError):
        raise InvalidInterval(value)
    if not math.isfinite(interval) or interval <= 0:
        raise InvalidInterval(value)
    return interval


class UpdateRegistry:
    """guild id -> channel id -> RecurringJob

    All mutations happen synchronously on the event loop, so no lock is
    needed while the bot runs a single loop.
    """

    def __init__(self, report_callback: ReportCallback):
        """
        Args:
            report_callback: async callable(channel, timezone, date_format)
                run on every tick
        """
        self.report_callback = report_callback
        self._jobs: Dict[int, Dict[int, RecurringJob]] = {}

    def __len__(self) -> int:
        return sum(len(channels) for channels in self._jobs.values())

    def get(self, guild_id: int, channel_id: int) -> Optional[RecurringJob]:
        return self._jobs.get(guild_id, {}).get(channel_id)

    def jobs(self) -> List[RecurringJob]:
        return [job for channels in self._jobs.values() for job in channels.values()]

    def register(self, guild, channel, interval=None,
                 timezone: Optional[str] = None,
                 date_format: Optional[str] = None) -> RecurringJob:
        """Start a recurring update for a channel

        Args:
            guild: Guild of the channel, None for direct messages
            channel: Destination channel
            interval: Milliseconds between reports (default one day)
            timezone: Zone passed to every report
            date_format: Date format passed to every report

        Returns:
            The new RecurringJob

        Raises:
            NoServerContext: guild is None
            InvalidInterval: interval is not a positive number
            InvalidTimeZone: timezone is unknown
            DuplicateRecurringJob: channel already has a job
        """
        if guild is None:
            raise NoServerContext()

        interval_ms = parse_interval(interval)
        if timezone is not None:
            get_timezone(timezone)

        if self.get(guild.id, channel.id) is not None:
            raise DuplicateRecurringJob(guild.id, channel.id)

        job = RecurringJob(
            guild_id=guild.id,
            channel_id=channel.id,
            interval_ms=interval_ms,
            timezone=timezone,
            date_format=date_format,
        )
        job.loop = self._start_loop(job, channel)
        self._jobs.setdefault(guild.id, {})[channel.id] = job

        log.info(f"daily interval set for {getattr(channel, 'name', channel.id)} "
                 f"every {interval_ms:g} ms")
        return job

    def _start_loop(self, job: RecurringJob, channel) -> tasks.Loop:
        """Create and start the tasks.Loop backing a job

        The first report goes out one interval after registration.
        """
        async def tick():
            try:
                await self.report_callback(channel, job.timezone, job.date_format)
            except Exception as e:
                # A failed tick must not stop the loop
                log_error(e, "Recurring update tick", {
                    "guild_id": job.guild_id,
                    "channel_id": job.channel_id,
                })

        loop = tasks.loop(seconds=job.interval_seconds)(tick)

        @loop.before_loop
        async def wait_first_interval():
            await asyncio.sleep(job.interval_seconds)

        loop.start()
        return loop

    def shutdown(self):
        """Cancel every recurring job (process shutdown)"""
        for job in self.jobs():
            job.cancel()
        log.info(f"Cancelled {len(self)} recurring update(s)")

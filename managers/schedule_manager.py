"""
Schedule management for the daily anime report.

Handles fetching the monthly calendar, filtering it down to one day,
ordering the shows and building the report embeds.
"""

import asyncio
import datetime
import functools
import itertools
from typing import Dict, Iterable, List, Optional, Tuple

import aiohttp
import discord
import pytz

from config import (
    config,
    UNKNOWN_TITLE,
    EMPTY_FIELD_NAME,
    EMBED_MAX_FIELDS,
    EMBED_FIELD_NAME_LIMIT,
    EMBED_TOTAL_LIMIT,
    MESSAGE_MAX_EMBEDS,
)
from models.schedule import Episode, Series, SeriesGroup, TimeContext
from utils.error_handling import (
    AnimeBotError,
    DeliveryFailure,
    UpstreamUnavailable,
    get_logger,
    is_retryable_error,
    log_error,
)
from utils.formatting import (
    format_episode_line,
    format_report_date,
    is_unknown_time,
    random_report_color,
    truncate_field_value,
)
from utils.time_context import resolve_time_context

log = get_logger('schedule')

# Ordering sentinel for episodes with an unknown (midnight) air time
LATE_SENTINEL = datetime.time(23, 59)


# ============================================================================
# FETCHING
# ============================================================================

def parse_air_time(value: str) -> datetime.datetime:
    """Parse a provider timestamp; values without an offset are UTC

    Accepts "2024-05-01T12:30:00Z", "2024-05-01 12:30:00",
    "2024-05-01T21:30:00+09:00".
    """
    text = value.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    moment = datetime.datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = pytz.UTC.localize(moment)
    return moment


def parse_calendar_payload(data: dict) -> Tuple[List[Episode], List[Series]]:
    """Turn the provider JSON body into Episode and Series records

    Episodes that cannot be parsed are skipped and logged.
    """
    episodes = []
    for raw in data.get('episodes') or []:
        try:
            episodes.append(Episode(
                series_id=raw['anime_id'],
                number=int(raw['number']),
                air_time=parse_air_time(raw['datetime']),
            ))
        except (KeyError, TypeError, ValueError) as e:
            log.warning(f"Skipping malformed episode {raw!r}: {e}")

    series = []
    for raw in data.get('animes') or []:
        try:
            series_id = raw['id']
            title = raw.get('main_title')
        except (KeyError, TypeError, AttributeError) as e:
            log.warning(f"Skipping malformed series {raw!r}: {e}")
            continue
        series.append(Series(series_id=series_id, title=str(title) if title is not None else None))

    return episodes, series


async def fetch_calendar(ctx: TimeContext,
                         session: Optional[aiohttp.ClientSession] = None
                         ) -> Tuple[List[Episode], List[Series]]:
    """Fetch the provider calendar for the context's month

    Raises:
        UpstreamUnavailable: non-200 status or transport failure
    """
    if session is None:
        async with aiohttp.ClientSession() as session:
            return await fetch_calendar(ctx, session)

    params = {"date": ctx.api_date_param}
    try:
        async with session.get(
            config.ANIME_API_URL,
            params=params,
            timeout=aiohttp.ClientTimeout(total=config.FETCH_TIMEOUT_SECONDS)
        ) as resp:
            log.info(f"received response with status {resp.status} from {config.ANIME_API_URL}")
            if resp.status != 200:
                payload = await resp.text()
                raise UpstreamUnavailable(resp.status, payload)
            data = await resp.json(content_type=None)
    except (aiohttp.ClientError, asyncio.TimeoutError) as e:
        raise UpstreamUnavailable(None, str(e) or type(e).__name__) from e
    except ValueError as e:
        raise UpstreamUnavailable(200, f"invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise UpstreamUnavailable(200, "unexpected response body")
    return parse_calendar_payload(data)


# ============================================================================
# AGGREGATION
# ============================================================================

def aggregate_episodes(episodes: Iterable[Episode],
                       series: Iterable[Series],
                       ctx: TimeContext) -> List[SeriesGroup]:
    """Group the target day's episodes by series

    Episodes are converted to the context zone; only those whose local date is
    the target day survive. Groups keep provider order within a series.
    """
    titles: Dict[int, str] = {}
    for show in series:
        titles[show.series_id] = show.title  # last write wins

    tz = ctx.tzinfo
    groups: Dict[int, SeriesGroup] = {}
    for episode in episodes:
        local = episode.in_zone(tz)
        if not ctx.is_target_day(local.air_time):
            continue

        group = groups.get(local.series_id)
        if group is None:
            title = titles.get(local.series_id)
            group = SeriesGroup(
                series_id=local.series_id,
                title=UNKNOWN_TITLE if title is None else title,
            )
            groups[local.series_id] = group
        group.episodes.append(local)

    return list(groups.values())


# ============================================================================
# RANKING
# ============================================================================

def ordering_time(moment: datetime.datetime) -> datetime.time:
    """Time of day used for ordering; midnight sorts as 23:59"""
    if is_unknown_time(moment):
        return LATE_SENTINEL
    return moment.time()


def _all_after(a: SeriesGroup, b: SeriesGroup) -> bool:
    """True if every episode of a airs after every episode of b"""
    a_times = [ordering_time(ep.air_time) for ep in a.episodes]
    b_times = [ordering_time(ep.air_time) for ep in b.episodes]
    return min(a_times) > max(b_times)


def compare_groups(a: SeriesGroup, b: SeriesGroup) -> int:
    """Order two groups: air time dominance first, then title

    Returns 1 if a sorts after b, -1 if before, 0 if tied.
    """
    if _all_after(a, b):
        return 1
    if _all_after(b, a):
        return -1
    if a.title < b.title:
        return -1
    if a.title > b.title:
        return 1
    return 0


def find_intransitive_triples(groups: List[SeriesGroup]) -> List[Tuple[SeriesGroup, SeriesGroup, SeriesGroup]]:
    """Find cycles x < y < z < x that compare_groups can produce

    Mixed dominance falls back to titles, which can disagree with the
    air time order of a third group.
    """
    cycles = []
    for x, y, z in itertools.combinations(groups, 3):
        for a, b, c in ((x, y, z), (x, z, y)):
            if compare_groups(a, b) < 0 and compare_groups(b, c) < 0 and compare_groups(c, a) < 0:
                cycles.append((a, b, c))
    return cycles


def rank_groups(groups: Iterable[SeriesGroup]) -> List[SeriesGroup]:
    """Stable sort of series groups for display"""
    groups = list(groups)
    cycles = find_intransitive_triples(groups)
    if cycles:
        names = "; ".join(" < ".join(g.title for g in cycle) for cycle in cycles)
        log.warning(f"Ordering is not transitive for {len(cycles)} group triple(s): {names}")
    return sorted(groups, key=functools.cmp_to_key(compare_groups))


# ============================================================================
# REPORT
# ============================================================================

def build_group_field(group: SeriesGroup) -> Tuple[str, str]:
    """Embed field (name, value) for one series, cut to Discord's limits"""
    name = truncate_field_value(group.title or EMPTY_FIELD_NAME, EMBED_FIELD_NAME_LIMIT)
    value = "".join(format_episode_line(ep.number, ep.air_time) for ep in group.episodes)
    return name, truncate_field_value(value)


def build_schedule_embeds(groups: List[SeriesGroup],
                          ctx: TimeContext,
                          date_format: Optional[str] = None,
                          color: Optional[int] = None) -> List[discord.Embed]:
    """Build the report embeds for ranked groups

    An embed holds at most 25 fields and 6000 characters, so long days
    continue in further embeds sharing the same color.
    """
    day = format_report_date(ctx.target_date, date_format or ctx.date_format)
    title = f"Anime for {day}"
    if color is None:
        color = random_report_color()

    fields = [build_group_field(group) for group in groups]
    if not fields:
        return [discord.Embed(title=title, color=color, description="No anime airing today.")]

    embeds = []
    embed = None
    for name, value in fields:
        if (embed is None
                or len(embed.fields) >= EMBED_MAX_FIELDS
                or len(embed) + len(name) + len(value) > EMBED_TOTAL_LIMIT):
            embed = discord.Embed(
                title=title if not embeds else f"{title} (cont.)",
                color=color
            )
            embeds.append(embed)
        embed.add_field(name=name, value=value, inline=False)
    return embeds


def batch_embeds(embeds: List[discord.Embed]) -> List[List[discord.Embed]]:
    """Group embeds into messages of at most 10 embeds and 6000 characters"""
    batches = []
    current, size = [], 0
    for embed in embeds:
        if current and (len(current) >= MESSAGE_MAX_EMBEDS or size + len(embed) > EMBED_TOTAL_LIMIT):
            batches.append(current)
            current, size = [], 0
        current.append(embed)
        size += len(embed)
    if current:
        batches.append(current)
    return batches


async def safe_send(channel, content: str = None, embeds: List[discord.Embed] = None) -> bool:
    """Send to a channel; delivery errors are logged and swallowed

    Returns:
        True if every message was delivered
    """
    try:
        if embeds:
            for index, batch in enumerate(batch_embeds(embeds)):
                await channel.send(content=content if index == 0 else None, embeds=batch)
        else:
            await channel.send(content=content)
        return True
    except discord.DiscordException as e:
        log_error(DeliveryFailure(getattr(channel, 'id', None), e), "Sending to channel")
        return False


async def send_todays_anime(channel,
                            timezone: Optional[str] = None,
                            date_format: Optional[str] = None,
                            fetcher=fetch_calendar,
                            now: Optional[datetime.datetime] = None) -> bool:
    """Fetch, build and send today's anime report to a channel

    Used both by the on-demand command and every recurring tick. Errors are
    reported to the channel and never raised.

    Returns:
        True if a report was delivered
    """
    try:
        ctx = resolve_time_context(timezone, date_format, now=now)
    except AnimeBotError as e:
        log.info(f"Rejected schedule request in channel {getattr(channel, 'id', None)}: {e}")
        await safe_send(channel, e.user_message)
        return False

    try:
        episodes, series = await fetcher(ctx)
    except UpstreamUnavailable as e:
        log_error(e, "Fetching calendar", {
            "date": ctx.api_date_param,
            "transient": is_retryable_error(e),
        })
        await safe_send(channel, e.user_message)
        return False

    groups = rank_groups(aggregate_episodes(episodes, series, ctx))
    log.info(f"{len(groups)} series airing on {ctx.target_date} ({ctx.timezone})")

    embeds = build_schedule_embeds(groups, ctx)
    return await safe_send(channel, embeds=embeds)

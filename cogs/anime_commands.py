"""
Anime Commands - prefix message commands for the schedule bot
Compatible with discord.Client (no commands.Bot required)

    -> anime-today [timezone] [format]
    -> update [interval_ms] [timezone] [format]
    -> praise-the-sun
    -> help
"""
import discord
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from config import config
from managers.schedule_manager import safe_send, send_todays_anime
from managers.update_registry import UpdateRegistry
from utils.error_handling import AnimeBotError, get_logger
from utils.time_context import is_date_format

log = get_logger('commands')

PRAISE_THE_SUN = '\\\\[T]/ \\\\[T]/ \\\\[T]/'

HELP_TEXT = (
    "Here are a list of commands you can execute:\n\n"
    "* `-> anime-today [timezone] [format]` to get the anime showing today\n"
    "* `-> update [interval_ms] [timezone] [format]` to set the current channel "
    "to receive daily updates\n"
    "* `-> praise-the-sun` to get the praise the sun emoji\n"
    "* `-> help` to show this message\n\n"
    "`timezone` is an IANA identifier such as `America/New_York`; "
    "`format` is one of `YMD`, `DMY` or `MDY`."
)


@dataclass
class ParsedCommand:
    name: str
    args: List[str] = field(default_factory=list)


def parse_command(content: str, prefix: str = None) -> Optional[ParsedCommand]:
    """
    Parse "-> name arg1 arg2" into a ParsedCommand.
    Returns None if the message is not a command.
    """
    prefix = prefix or config.COMMAND_PREFIX
    text = (content or '').strip()
    if not text.startswith(prefix):
        return None

    parts = text[len(prefix):].split()
    if not parts:
        return None
    return ParsedCommand(name=parts[0].lower(), args=parts[1:])


def split_time_args(args: List[str]) -> Tuple[Optional[str], Optional[str]]:
    """
    Split [timezone] [format] arguments.
    A lone argument that is a format token is the format, not a zone.
    """
    if not args:
        return None, None
    if len(args) == 1 and is_date_format(args[0]):
        return None, args[0]
    timezone = args[0]
    date_format = args[1] if len(args) > 1 else None
    return timezone, date_format


async def query_today(channel, args: List[str]) -> bool:
    """Handle -> anime-today"""
    timezone, date_format = split_time_args(args)
    return await send_todays_anime(channel, timezone, date_format)


async def register_daily(registry: UpdateRegistry, guild, channel, args: List[str]) -> bool:
    """Handle -> update"""
    interval = args[0] if args else None
    timezone, date_format = split_time_args(args[1:])

    try:
        registry.register(guild, channel, interval, timezone, date_format)
    except AnimeBotError as e:
        log.info(f"Rejected update for channel {channel.id}: {e}")
        await safe_send(channel, e.user_message)
        return False

    await safe_send(channel, f"daily interval has been set for {guild.name}#{channel.name}")
    return True


async def send_help(channel) -> bool:
    return await safe_send(channel, HELP_TEXT)


async def handle_message(message: discord.Message, registry: UpdateRegistry) -> bool:
    """
    Dispatch a message to its command.
    Returns True if message was a known command.
    """
    if message.author.bot:
        return False

    command = parse_command(message.content)
    if command is None:
        return False

    log.info(f"message received: {message.content}")

    if command.name == 'anime-today':
        await query_today(message.channel, command.args)
    elif command.name == 'update':
        await register_daily(registry, message.guild, message.channel, command.args)
    elif command.name == 'praise-the-sun':
        await safe_send(message.channel, PRAISE_THE_SUN)
    elif command.name == 'help':
        await send_help(message.channel)
    else:
        return False

    return True

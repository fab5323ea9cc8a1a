"""
Error handling and logging module.

Provides the bot's exception types, centralized error logging with file
persistence, and the activity logger shared by every module.
"""

import os
import sys
import logging
from logging.handlers import RotatingFileHandler, TimedRotatingFileHandler
from typing import Optional
from config import LOGS_DIR, config

# ============================================================================
# ERROR LOGGING SYSTEM
# ============================================================================

# Setup error logger with rotation (5MB per file, keep 5 backup files)
error_logger = logging.getLogger('bot_errors')
error_logger.setLevel(logging.ERROR)

# Rotating file handler - creates new file when size exceeds 5MB
error_log_file = os.path.join(LOGS_DIR, "errors.log")
if not error_logger.handlers:
    error_handler = RotatingFileHandler(
        error_log_file,
        maxBytes=5*1024*1024,  # 5MB per file
        backupCount=5,          # Keep 5 backup files
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)

    # Format: timestamp | level | location | message
    error_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(funcName)s:%(lineno)d | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    error_handler.setFormatter(error_formatter)
    error_logger.addHandler(error_handler)

# ============================================================================
# ACTIVITY LOGGING SYSTEM
# ============================================================================

# Activity log: stdout + one file per day, keep 3 days
logger = logging.getLogger('anime_bot')
logger.setLevel(getattr(logging, config.LOG_LEVEL, logging.INFO))

activity_log_file = os.path.join(LOGS_DIR, "bot.log")
if not logger.handlers:
    activity_formatter = logging.Formatter(
        '%(asctime)s | %(levelname)s | %(name)s | %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(logging.INFO)
    stdout_handler.setFormatter(activity_formatter)
    logger.addHandler(stdout_handler)

    activity_handler = TimedRotatingFileHandler(
        activity_log_file,
        when='D',
        interval=1,
        backupCount=3,
        encoding='utf-8'
    )
    activity_handler.setFormatter(activity_formatter)
    logger.addHandler(activity_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a child of the activity logger, e.g. get_logger('registry')"""
    return logger.getChild(name)


# ============================================================================
# EXCEPTIONS
# ============================================================================

EXPECTED_TIMEZONE_FORMAT = (
    "Time zones must be IANA identifiers such as `UTC`, `America/New_York` "
    "or `Asia/Tokyo`."
)


class AnimeBotError(Exception):
    """Base class for errors reported back to a channel"""

    @property
    def user_message(self) -> str:
        return str(self)


class InvalidTimeZone(AnimeBotError):
    """Time zone identifier is not in the zone database"""

    def __init__(self, timezone: str):
        self.timezone = timezone
        super().__init__(f"Unknown time zone '{timezone}'")

    @property
    def user_message(self) -> str:
        return f"Unknown time zone `{self.timezone}`. {EXPECTED_TIMEZONE_FORMAT}"


class InvalidInterval(AnimeBotError):
    """Update interval is not a positive number of milliseconds"""

    def __init__(self, interval):
        self.interval = interval
        super().__init__(f"Invalid update interval '{interval}'")

    @property
    def user_message(self) -> str:
        return (f"`{self.interval}` is not a valid interval. "
                "Give the interval in milliseconds, e.g. `86400000` for one day.")


class NoServerContext(AnimeBotError):
    """Recurring updates need a server channel"""

    def __init__(self):
        super().__init__("only server channels may have daily updates")


class DuplicateRecurringJob(AnimeBotError):
    """A recurring job already exists for this channel"""

    def __init__(self, guild_id: int, channel_id: int):
        self.guild_id = guild_id
        self.channel_id = channel_id
        super().__init__("update has already been set for this channel")


class UpstreamUnavailable(AnimeBotError):
    """Schedule provider returned a non-2xx status or could not be reached

    status is None for transport failures.
    """

    def __init__(self, status: Optional[int], payload=None):
        self.status = status
        self.payload = payload
        super().__init__(f"Schedule provider unavailable: {status} -- {payload}")

    @property
    def user_message(self) -> str:
        return f"There was an issue fetching anime data: {self.status} -- {self.payload}"


class DeliveryFailure(AnimeBotError):
    """Discord rejected a message"""

    def __init__(self, channel_id, cause: Exception):
        self.channel_id = channel_id
        self.cause = cause
        super().__init__(f"Failed to deliver to channel {channel_id}: {cause}")


# ============================================================================
# HELPERS
# ============================================================================

def log_error(error: Exception, context: str = None, extra_info: dict = None):
    """Log error to local file for debugging

    Args:
        error: The exception that occurred
        context: Description of what was happening when error occurred
        extra_info: Additional key-value pairs to log

    Example:
        try:
            something()
        except Exception as e:
            log_error(e, "Fetching calendar", {"month": "05-2024"})
    """
    try:
        error_msg = f"{type(error).__name__}: {str(error)}"
        if context:
            error_msg = f"[{context}] {error_msg}"
        if extra_info:
            info_str = " | ".join(f"{k}={v}" for k, v in extra_info.items())
            error_msg = f"{error_msg} | {info_str}"

        error_logger.error(error_msg, exc_info=error.__traceback__ is not None)
        logger.error(error_msg)
    except Exception as log_e:
        print(f"⚠️ Failed to log error: {log_e}")


def is_retryable_error(e: Exception) -> bool:
    """Check if an error is network-related and will likely clear by itself

    Args:
        e: The exception to check

    Returns:
        True if error is transient, False otherwise
    """
    if isinstance(e, UpstreamUnavailable) and e.status is not None:
        return e.status in (429, 500, 502, 503, 504)

    error_str = str(e).lower()
    retryable_keywords = [
        "remotedisconnected", "connection aborted", "service unavailable",
        "429", "failed to resolve", "name resolution", "timeout",
        "cannot connect to host", "server disconnected",
        # Server errors (typically transient)
        "500", "502", "503", "504",
        "server error", "bad gateway", "gateway timeout",
        "internal server error", "temporarily unavailable",
    ]
    return any(keyword in error_str for keyword in retryable_keywords)

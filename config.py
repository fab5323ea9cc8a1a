"""
Configuration module for the Anime Schedule Bot

This module centralizes all configuration constants, environment variables,
and file paths used throughout the bot.
"""

import os
from dataclasses import dataclass
from dotenv import load_dotenv

# ============================================================================
# ENVIRONMENT SETUP
# ============================================================================

# Load environment variables from .env file (use absolute path for hosting)
SCRIPT_DIR = os.path.dirname(os.path.realpath(__file__))
_ENV_FILE = os.path.join(SCRIPT_DIR, '.env')

if os.path.exists(_ENV_FILE):
    print(f"🔍 Loading .env from: {_ENV_FILE}")

load_dotenv(_ENV_FILE)

# ============================================================================
# FILE PATHS
# ============================================================================

LOGS_DIR = os.path.join(SCRIPT_DIR, "logs")
os.makedirs(LOGS_DIR, exist_ok=True)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def parse_int(env_var: str, default: int) -> int:
    """Parse an integer from environment variable, falling back to default"""
    value = os.getenv(env_var, "")
    if not value:
        return default
    try:
        return int(value.strip())
    except ValueError:
        return default


# ============================================================================
# BOT CONFIGURATION
# ============================================================================

@dataclass
class BotConfig:
    """Bot configuration constants"""
    DISCORD_BOT_TOKEN: str = None
    ANIME_API_URL: str = 'https://www.monthly.moe/api/v1/calendar'
    DEFAULT_TIMEZONE: str = 'UTC'
    DEFAULT_DATE_FORMAT: str = 'YMD'
    DEFAULT_UPDATE_INTERVAL_MS: int = 86400000  # one day
    FETCH_TIMEOUT_SECONDS: int = 30
    COMMAND_PREFIX: str = '->'
    LOG_LEVEL: str = 'INFO'

    def __post_init__(self):
        # Load from environment variables for security
        self.DISCORD_BOT_TOKEN = os.getenv('DISCORD_BOT_TOKEN', '')
        self.ANIME_API_URL = os.getenv('ANIME_API_URL', self.ANIME_API_URL)
        self.DEFAULT_TIMEZONE = os.getenv('DEFAULT_TIMEZONE', self.DEFAULT_TIMEZONE)
        self.DEFAULT_DATE_FORMAT = os.getenv('DEFAULT_DATE_FORMAT', self.DEFAULT_DATE_FORMAT).upper()
        self.DEFAULT_UPDATE_INTERVAL_MS = parse_int('DEFAULT_UPDATE_INTERVAL_MS', self.DEFAULT_UPDATE_INTERVAL_MS)
        self.FETCH_TIMEOUT_SECONDS = parse_int('FETCH_TIMEOUT_SECONDS', self.FETCH_TIMEOUT_SECONDS)
        self.COMMAND_PREFIX = os.getenv('COMMAND_PREFIX', self.COMMAND_PREFIX)
        self.LOG_LEVEL = os.getenv('LOG_LEVEL', self.LOG_LEVEL).upper()


config = BotConfig()

# ============================================================================
# REPORT SYSTEM
# ============================================================================

UNKNOWN_TITLE = "unknown title"
UNKNOWN_TIME_MARKER = "???"

# Discord rejects empty field names; zero-width space renders as blank
EMPTY_FIELD_NAME = "\u200b"

# Discord embed limits
EMBED_MAX_FIELDS = 25
EMBED_FIELD_NAME_LIMIT = 256
EMBED_FIELD_VALUE_LIMIT = 1024
EMBED_TOTAL_LIMIT = 6000  # per message, summed over its embeds
MESSAGE_MAX_EMBEDS = 10

# Upper bound (exclusive) for the random embed color
REPORT_COLOR_RANGE = 1000000

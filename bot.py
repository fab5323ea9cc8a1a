import sys

import discord

from config import config
from cogs.anime_commands import handle_message
from managers.schedule_manager import send_todays_anime
from managers.update_registry import UpdateRegistry
from utils.error_handling import get_logger, log_error

log = get_logger('bot')


# ============================================================================
# DISCORD BOT CLIENT
# ============================================================================

class AnimeScheduleBot(discord.Client):
    """Discord client answering anime schedule commands"""

    def __init__(self, *, intents: discord.Intents):
        super().__init__(intents=intents)
        self.registry = UpdateRegistry(send_todays_anime)

    async def on_ready(self):
        print(f"✅ Logged in as {self.user} (ID: {self.user.id})")
        log.info(f"Anime schedule bot is ready! Serving {len(self.guilds)} guilds")

    async def on_message(self, message: discord.Message):
        """Process prefix commands"""
        try:
            await handle_message(message, self.registry)
        except Exception as e:
            log_error(e, "Handling message", {
                "channel_id": getattr(message.channel, 'id', None),
                "content": message.content,
            })

    async def close(self):
        self.registry.shutdown()
        await super().close()


# ============================================================================
# BOT INITIALIZATION
# ============================================================================

def create_client() -> AnimeScheduleBot:
    intents = discord.Intents.default()
    intents.message_content = True
    return AnimeScheduleBot(intents=intents)


if __name__ == "__main__":
    # Load bot token from environment variable (secure method)
    BOT_TOKEN = config.DISCORD_BOT_TOKEN

    if not BOT_TOKEN:
        print("ERROR: DISCORD_BOT_TOKEN environment variable is not set!")
        print("Please create a .env file with:")
        print("    DISCORD_BOT_TOKEN=your_bot_token_here")
        print("")
        print("Or set the environment variable directly.")
        sys.exit(1)

    try:
        print("Starting bot...")
        create_client().run(BOT_TOKEN)
    except discord.LoginFailure:
        print("ERROR: Invalid Bot Token.")
        print("Please check your token at: https://discord.com/developers/applications")

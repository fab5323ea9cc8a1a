"""Shared fakes for the schedule bot tests"""

import discord
import pytest


class FakeChannel:
    """Records everything sent to it"""

    def __init__(self, channel_id=200, name="anime", fail=False):
        self.id = channel_id
        self.name = name
        self.fail = fail
        self.sent = []

    async def send(self, content=None, *, embeds=None):
        if self.fail:
            raise discord.DiscordException("Missing Permissions")
        self.sent.append({"content": content, "embeds": embeds})

    @property
    def texts(self):
        return [m["content"] for m in self.sent if m["content"]]

    @property
    def embeds(self):
        return [e for m in self.sent for e in (m["embeds"] or [])]


class FakeGuild:
    def __init__(self, guild_id=100, name="otaku"):
        self.id = guild_id
        self.name = name


class FakeAuthor:
    def __init__(self, bot=False):
        self.bot = bot


class FakeMessage:
    def __init__(self, content, channel, guild=None, bot=False):
        self.content = content
        self.channel = channel
        self.guild = guild
        self.author = FakeAuthor(bot)


@pytest.fixture
def channel():
    return FakeChannel()


@pytest.fixture
def guild():
    return FakeGuild()


@pytest.fixture
def make_channel():
    return FakeChannel


@pytest.fixture
def make_message():
    return FakeMessage

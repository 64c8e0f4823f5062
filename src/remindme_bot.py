"""
remindme Discord Bot

Maintains the Discord connection, stores reminders from the ``!remindme``
command and delivers them by DM from a background poll loop.
"""

import asyncio
import logging
from typing import Optional

import asyncpg
import discord
from discord.ext import commands
from dotenv import load_dotenv

from commands.remindme_commands import RemindMeCommands
from reminders import (
    AnalyticsReporter,
    DiscordNotifier,
    ReminderConfig,
    ReminderScheduler,
    ReminderStore,
)

load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("remindme")


class RemindMeBot(commands.Bot):
    """Discord bot that owns the reminder store and scheduler."""

    def __init__(self, config: ReminderConfig):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.messages = True

        super().__init__(command_prefix=config.command_prefix, intents=intents)

        self.config = config
        self.db_pool: Optional[asyncpg.Pool] = None
        self.scheduler: Optional[ReminderScheduler] = None

    async def setup_hook(self):
        """Called when the bot is starting up."""
        logger.info(f"Setup: DATABASE_URL={'set' if self.config.database_url else 'missing'}")
        logger.info(f"Setup: ANALYTICS_ENABLED={self.config.analytics_enabled}")

        self.db_pool = await asyncpg.create_pool(
            self.config.database_url,
            min_size=self.config.db_pool_min_size,
            max_size=self.config.db_pool_max_size,
        )
        store = ReminderStore(self.db_pool)
        await store.ensure_schema()

        self.scheduler = ReminderScheduler(
            store,
            DiscordNotifier(self),
            reporter=AnalyticsReporter(self.db_pool, enabled=self.config.analytics_enabled),
            poll_interval=self.config.poll_interval_seconds,
        )
        await self.add_cog(RemindMeCommands(self, self.scheduler))

        # Started once for the lifetime of the process
        self.scheduler.start()

    async def on_ready(self):
        """Called when the bot has connected to Discord."""
        logger.info(f"Logged in as {self.user} (ID: {self.user.id})")

    async def close(self):
        """Stop the poll loop and release the pool before disconnecting."""
        try:
            if self.scheduler is not None:
                await self.scheduler.stop()
        finally:
            try:
                if self.db_pool is not None:
                    await self.db_pool.close()
            finally:
                await super().close()


async def main():
    """Run the bot."""
    config = ReminderConfig.from_env()
    if not config.discord_token:
        print("Error: DISCORD_BOT_TOKEN environment variable not set")
        print("Please set it in your .env file")
        return
    if not config.database_url:
        print("Error: DATABASE_URL environment variable not set")
        return

    bot = RemindMeBot(config)
    async with bot:
        await bot.start(config.discord_token)


if __name__ == "__main__":
    asyncio.run(main())

# remindme - Discord Reminder Bot
# Copyright (c) 2025-2026 Slash Daemon slashdaemon@protonmail.com
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, version 3 of the License.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.
#
# Commercial licensing: [slashdaemon@protonmail.com]

"""
Reminder Commands

The ``!remindme x scale [message]`` prefix command.
"""

import logging

from discord.ext import commands

from reminders import USAGE, DateOverflowError, ReminderScheduler, StorageError

logger = logging.getLogger("remindme.commands.remindme")


class RemindMeCommands(commands.Cog):
    """
    Prefix commands for one-shot reminders.

    Commands:
    - !remindme 5 minutes call mom
    """

    def __init__(self, bot: commands.Bot, scheduler: ReminderScheduler):
        self.bot = bot
        self.scheduler = scheduler

    @commands.command(name="remindme")
    async def remindme(
        self,
        ctx: commands.Context,
        num: int,
        scale: str,
        *,
        message: str = "",
    ):
        """Remind you of something in x minutes, hours, days or weeks."""
        try:
            response = await self.scheduler.submit(num, scale, message, ctx.author.id)
        except DateOverflowError:
            await ctx.send("That's too far in the future, I can't remember that long.")
            return
        except StorageError as e:
            logger.error(f"Failed to store reminder for user {ctx.author.id}: {e}")
            await ctx.send("Something went wrong while saving your reminder. Please try again later.")
            return

        await ctx.send(response)

    @remindme.error
    async def remindme_error(self, ctx: commands.Context, error: commands.CommandError):
        """Reply with usage text for malformed invocations."""
        if isinstance(error, (commands.MissingRequiredArgument, commands.BadArgument)):
            await ctx.send(USAGE)
            return
        logger.error(f"Unhandled !remindme error: {error}", exc_info=error)

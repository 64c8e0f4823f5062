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
Reminder Notifier Module

Sends reminder texts to users as Discord direct messages.
"""

import logging
from typing import Optional, Protocol

import discord

from .errors import DeliveryError

logger = logging.getLogger("remindme.reminders.notifier")

# Discord message length limit
DISCORD_MAX_LENGTH = 2000

EMPTY_REMINDER_TEXT = (
    "Hello! You asked me to remind you of something at this time,\n"
    "but you didn't specify what!"
)


def format_reminder_text(message: str) -> str:
    """
    Build the DM text for a reminder.

    Args:
        message: The user's reminder message (may be empty)

    Returns:
        Text to send, at most DISCORD_MAX_LENGTH characters
    """
    if not message:
        return EMPTY_REMINDER_TEXT

    text = f"Hello! You asked me to remind you of the following: {message}"
    if len(text) > DISCORD_MAX_LENGTH:
        text = text[: DISCORD_MAX_LENGTH - 20] + "\n\n[...truncated]"
    return text


class Notifier(Protocol):
    """Anything that can deliver a reminder text to a user."""

    async def deliver(self, user_id: str, message: str) -> Optional[DeliveryError]:
        ...


class DiscordNotifier:
    """Delivers reminders as DMs through a discord.py client."""

    def __init__(self, client: discord.Client):
        self.client = client

    async def _resolve_user(self, user_id: str) -> discord.User:
        try:
            snowflake = int(user_id)
        except (TypeError, ValueError):
            raise DeliveryError(user_id, f"Failed to get user id from {user_id!r}")

        user = self.client.get_user(snowflake)
        if user is None:
            try:
                user = await self.client.fetch_user(snowflake)
            except discord.NotFound:
                raise DeliveryError(user_id, "User not found")
            except discord.HTTPException as e:
                raise DeliveryError(user_id, f"Failed to get user: {e}")
        return user

    async def deliver(self, user_id: str, message: str) -> Optional[DeliveryError]:
        """
        Send one reminder DM.

        Args:
            user_id: Recipient's Discord user ID
            message: The reminder message (may be empty)

        Returns:
            None on success, DeliveryError if the user could not be reached
        """
        try:
            user = await self._resolve_user(user_id)
        except DeliveryError as e:
            return e
        except MemoryError:
            raise
        except Exception as e:
            # Transport failures (connection resets, timeouts) after discord.py's own retries
            return DeliveryError(user_id, f"Failed to get user: {str(e)[:200]}")

        try:
            await user.send(format_reminder_text(message))
        except discord.Forbidden:
            return DeliveryError(user_id, "User has DMs disabled")
        except discord.HTTPException as e:
            return DeliveryError(user_id, str(e)[:200])
        except MemoryError:
            raise
        except Exception as e:
            return DeliveryError(user_id, f"{type(e).__name__}: {str(e)[:200]}")

        logger.info(f"Delivered reminder to user {user_id} via DM")
        return None

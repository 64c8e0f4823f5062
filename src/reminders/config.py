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
Reminder Configuration

Runtime settings for the reminder bot.
Values can be overridden via environment variables.
"""

import os
from dataclasses import dataclass
from typing import Optional


@dataclass
class ReminderConfig:
    """Configuration for the reminder bot."""

    # Connections
    database_url: Optional[str] = None
    discord_token: Optional[str] = None
    command_prefix: str = "!"

    # Poll loop
    poll_interval_seconds: float = 60.0

    # Connection pool size
    db_pool_min_size: int = 1
    db_pool_max_size: int = 5

    analytics_enabled: bool = True

    @classmethod
    def from_env(cls) -> "ReminderConfig":
        """Create config from environment variables with defaults."""
        return cls(
            database_url=os.getenv("DATABASE_URL"),
            discord_token=os.getenv("DISCORD_BOT_TOKEN"),
            command_prefix=os.getenv("COMMAND_PREFIX", "!"),
            poll_interval_seconds=float(os.getenv("REMINDER_POLL_SECONDS", "60")),
            db_pool_min_size=int(os.getenv("REMINDER_DB_POOL_MIN", "1")),
            db_pool_max_size=int(os.getenv("REMINDER_DB_POOL_MAX", "5")),
            analytics_enabled=os.getenv("ANALYTICS_ENABLED", "true").lower() == "true",
        )

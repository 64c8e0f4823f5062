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
Poll loop reporting.

Nobody is waiting on the result of a background delivery, so the scheduler
reports outcomes through a reporter instead. LoggingReporter only logs;
AnalyticsReporter also records events in the analytics_events table.

Usage:
    reporter = AnalyticsReporter(db_pool)
    scheduler = ReminderScheduler(store, notifier, reporter=reporter)
"""

import asyncio
import json
import logging
from typing import Any, Optional, Protocol

import asyncpg

from .errors import DeliveryError
from .store import Reminder

logger = logging.getLogger("remindme.reminders.scheduler")


class ReminderReporter(Protocol):
    """Receives the outcomes of the background poll loop."""

    def reminder_delivered(self, reminder: Reminder) -> None:
        ...

    def delivery_failed(self, reminder: Reminder, error: DeliveryError) -> None:
        ...

    def claim_failed(self, error: Exception) -> None:
        ...

    def tick_failed(self, error: Exception) -> None:
        ...


class LoggingReporter:
    """Reports poll loop outcomes to the log."""

    def reminder_delivered(self, reminder: Reminder) -> None:
        logger.info(f"Delivered reminder {reminder.id} to user {reminder.user_id}")

    def delivery_failed(self, reminder: Reminder, error: DeliveryError) -> None:
        logger.error(f"Error while DM'ing for reminder {reminder.id}: {error}")

    def claim_failed(self, error: Exception) -> None:
        logger.error(f"Failed to get reminders: {error}")

    def tick_failed(self, error: Exception) -> None:
        logger.error(f"Error in reminder scheduler loop: {error}", exc_info=error)


class AnalyticsReporter(LoggingReporter):
    """
    Logs poll loop outcomes and records them as analytics events.

    Events are written fire-and-forget on the running event loop; a failed
    write is logged at debug level and otherwise ignored.
    """

    def __init__(self, db_pool: asyncpg.Pool, enabled: bool = True):
        self.db = db_pool
        self.enabled = enabled
        # Strong references so pending writes are not garbage-collected
        self._pending: set[asyncio.Task] = set()

    async def track_async(
        self,
        event_name: str,
        event_category: str,
        user_id: Optional[str] = None,
        properties: Optional[dict[str, Any]] = None,
    ) -> bool:
        """
        Record an event.

        Args:
            event_name: Specific event identifier (e.g., "reminder_delivered")
            event_category: One of: reminder, error
            user_id: Discord user ID (optional)
            properties: Additional event data as key-value pairs

        Returns:
            True if event was recorded, False otherwise
        """
        if not self.enabled:
            return False

        try:
            await self.db.execute(
                """
                INSERT INTO analytics_events
                    (event_name, event_category, user_id, properties)
                VALUES ($1, $2, $3, $4)
                """,
                event_name,
                event_category,
                int(user_id) if user_id and user_id.isdigit() else None,
                json.dumps(properties or {}),
            )
            return True
        except Exception as e:
            logger.debug(f"Analytics tracking failed: {e}")
            return False

    def track(
        self,
        event_name: str,
        event_category: str,
        user_id: Optional[str] = None,
        properties: Optional[dict[str, Any]] = None,
    ) -> None:
        """Record an event in the background. Skipped without a running loop."""
        if not self.enabled:
            return

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        task = loop.create_task(self.track_async(event_name, event_category, user_id, properties))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def reminder_delivered(self, reminder: Reminder) -> None:
        super().reminder_delivered(reminder)
        self.track(
            "reminder_delivered",
            "reminder",
            user_id=reminder.user_id,
            properties={"reminder_id": reminder.id},
        )

    def delivery_failed(self, reminder: Reminder, error: DeliveryError) -> None:
        super().delivery_failed(reminder, error)
        self.track(
            "reminder_delivery_error",
            "error",
            user_id=reminder.user_id,
            properties={
                "reminder_id": reminder.id,
                "error_message": error.reason[:200],
            },
        )

    def claim_failed(self, error: Exception) -> None:
        super().claim_failed(error)
        self.track(
            "scheduler_error",
            "error",
            properties={
                "error_type": type(error).__name__,
                "error_message": str(error)[:200],
            },
        )

    def tick_failed(self, error: Exception) -> None:
        super().tick_failed(error)
        self.track(
            "scheduler_error",
            "error",
            properties={
                "error_type": type(error).__name__,
                "error_message": str(error)[:200],
            },
        )

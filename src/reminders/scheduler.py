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
Reminder Scheduler Module

Stores new reminders for the command path and runs the background loop
that delivers due reminders.

Delivery is at-most-once: due reminders are deleted from the store before
they are sent, and a failed DM is reported but never retried.
"""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Optional, Union

import pytz

from .errors import DateOverflowError, DeliveryError, StorageError
from .interval_parser import ValidationError, parse_interval
from .notifier import Notifier
from .reporting import LoggingReporter, ReminderReporter
from .store import Reminder, ReminderStore

logger = logging.getLogger("remindme.reminders.scheduler")

# Seconds between polls for due reminders
POLL_INTERVAL_SECONDS = 60


def utc_now() -> datetime:
    return datetime.now(pytz.UTC)


class ReminderScheduler:
    """
    Creates reminders and delivers them once they are due.

    ``submit`` is called from command handlers, possibly many at once.
    ``run`` is a single long-lived loop that wakes every poll interval,
    claims due reminders and DMs each one.
    """

    def __init__(
        self,
        store: ReminderStore,
        notifier: Notifier,
        reporter: Optional[ReminderReporter] = None,
        poll_interval: float = POLL_INTERVAL_SECONDS,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        """
        Initialize the reminder scheduler.

        Args:
            store: Reminder persistence
            notifier: Delivers reminder DMs
            reporter: Receives poll loop outcomes (defaults to logging only)
            poll_interval: Seconds between polls
            clock: Returns the current UTC time
        """
        self.store = store
        self.notifier = notifier
        self.reporter = reporter or LoggingReporter()
        self.poll_interval = poll_interval
        self.clock = clock or utc_now
        self._shutdown: Optional[asyncio.Event] = None
        self._task: Optional[asyncio.Task] = None

    # =========================================================================
    # Command path
    # =========================================================================

    async def submit(self, num: int, scale: str, message: str, user_id: Union[int, str]) -> str:
        """
        Store a reminder for ``num scale`` from now.

        Args:
            num: Number of units
            scale: Scale token (minutes, hours, days or weeks)
            message: Reminder text, may be empty
            user_id: Recipient's Discord user ID

        Returns:
            Confirmation text, or usage text if the scale was not understood

        Raises:
            DateOverflowError: If the due date cannot be represented
            StorageError: If the reminder could not be stored
        """
        interval = parse_interval(num, scale)
        if isinstance(interval, ValidationError):
            return interval.message

        try:
            due_at = self.clock() + interval.to_timedelta()
        except OverflowError as e:
            raise DateOverflowError("Date overflow") from e

        await self.store.create(str(user_id), due_at, message)

        return f"Reminder set for {due_at.strftime('%Y-%m-%d %H:%M:%S')} UTC."

    # =========================================================================
    # Poll loop
    # =========================================================================

    async def tick(self) -> int:
        """
        Claim due reminders and deliver them.

        Returns:
            Number of reminders delivered successfully
        """
        try:
            due_reminders = await self.store.claim_due(self.clock())
        except StorageError as e:
            self.reporter.claim_failed(e)
            return 0

        delivered = 0
        for reminder in due_reminders:
            if await self._deliver(reminder):
                delivered += 1
        return delivered

    async def _deliver(self, reminder: Reminder) -> bool:
        # The row is already gone; a failure here loses this reminder only
        try:
            error = await self.notifier.deliver(reminder.user_id, reminder.message)
        except MemoryError:
            raise
        except Exception as e:
            error = DeliveryError(reminder.user_id, f"{type(e).__name__}: {str(e)[:200]}")

        if isinstance(error, DeliveryError):
            self.reporter.delivery_failed(reminder, error)
            return False

        self.reporter.reminder_delivered(reminder)
        return True

    async def run(self, shutdown: asyncio.Event) -> None:
        """
        Poll for due reminders until ``shutdown`` is set.

        Sleeps first, then polls. Errors inside a tick are reported and the
        loop carries on with the next tick.

        Args:
            shutdown: Set to stop the loop between ticks
        """
        logger.info(f"Reminder scheduler polling every {self.poll_interval}s")
        while not shutdown.is_set():
            try:
                await asyncio.wait_for(shutdown.wait(), timeout=self.poll_interval)
                break
            except asyncio.TimeoutError:
                pass

            try:
                await self.tick()
            except MemoryError:
                raise
            except Exception as e:
                self.reporter.tick_failed(e)

        logger.info("Reminder scheduler loop exited")

    def start(self) -> None:
        """Start the poll loop as a background task."""
        if self._task is None or self._task.done():
            self._shutdown = asyncio.Event()
            self._task = asyncio.create_task(self.run(self._shutdown))
            logger.info("Reminder scheduler started")

    async def stop(self) -> None:
        """Signal the poll loop to exit and wait for it."""
        if self._task is not None:
            self._shutdown.set()
            try:
                await self._task
            finally:
                self._task = None
            logger.info("Reminder scheduler stopped")

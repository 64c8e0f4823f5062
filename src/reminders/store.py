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
Reminder Store Module

Handles database operations for one-shot reminders.

Rows are only ever inserted or deleted. The scheduler claims due rows with a
single DELETE ... RETURNING statement, so a reminder is handed out at most
once, even with several pollers running against the same database.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import asyncpg

from .errors import StorageError

logger = logging.getLogger("remindme.reminders.store")

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS reminders (
    id SERIAL PRIMARY KEY,
    user_id TEXT NOT NULL,
    date TIMESTAMPTZ NOT NULL,
    message TEXT NOT NULL DEFAULT ''
);
CREATE INDEX IF NOT EXISTS idx_reminders_date ON reminders (date);
"""

# Failures that mean the database could not be reached or the query failed
DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, asyncio.TimeoutError)


@dataclass(frozen=True)
class Reminder:
    """A stored reminder row."""

    id: int
    user_id: str
    due_at: datetime  # UTC
    message: str

    @classmethod
    def from_row(cls, row) -> "Reminder":
        return cls(
            id=row["id"],
            user_id=row["user_id"],
            due_at=row["date"],
            message=row["message"] or "",
        )


class ReminderStore:
    """
    Persistence for reminders, backed by an asyncpg pool.

    The pool is safe to share between the command path and the poll loop;
    every method acquires its own connection.
    """

    def __init__(self, db_pool: asyncpg.Pool):
        """
        Initialize the reminder store.

        Args:
            db_pool: asyncpg connection pool
        """
        self.db = db_pool

    async def ensure_schema(self) -> None:
        """Create the reminders table if it does not exist yet."""
        try:
            await self.db.execute(SCHEMA_SQL)
        except DB_ERRORS as e:
            raise StorageError(f"Failed to create reminders table: {e}") from e
        logger.info("Reminders table ready")

    async def create(self, user_id: str, due_at: datetime, message: str) -> int:
        """
        Store a new reminder.

        Args:
            user_id: Recipient's Discord user ID
            due_at: When the reminder becomes due (UTC)
            message: Reminder text, may be empty

        Returns:
            The ID of the created reminder

        Raises:
            StorageError: If the insert fails
        """
        try:
            row = await self.db.fetchrow(
                """
                INSERT INTO reminders (user_id, date, message)
                VALUES ($1, $2, $3)
                RETURNING id
                """,
                user_id,
                due_at,
                message,
            )
        except DB_ERRORS as e:
            raise StorageError(f"Failed to store reminder: {e}") from e

        reminder_id = row["id"]
        logger.info(f"Created reminder {reminder_id} for user {user_id}: due={due_at}")
        return reminder_id

    async def claim_due(self, now: datetime) -> list[Reminder]:
        """
        Remove and return every reminder due at or before ``now``.

        Rows are deleted whether or not they are delivered afterwards, so
        recipients that cannot be reached (deleted accounts, closed DMs)
        are not retried forever.

        Args:
            now: Current time (UTC)

        Returns:
            The claimed reminders, oldest first

        Raises:
            StorageError: If the query fails; nothing is claimed in that case
        """
        try:
            rows = await self.db.fetch(
                """
                DELETE FROM reminders
                WHERE date <= $1
                RETURNING id, user_id, date, message
                """,
                now,
            )
        except DB_ERRORS as e:
            raise StorageError(f"Failed to get reminders: {e}") from e

        reminders = sorted((Reminder.from_row(row) for row in rows), key=lambda r: r.due_at)
        if reminders:
            logger.info(f"Claimed {len(reminders)} due reminder(s)")
        return reminders

    # =========================================================================
    # Operator queries (read-only)
    # =========================================================================

    async def list_pending(
        self,
        user_id: Optional[str] = None,
        limit: int = 50,
    ) -> list[Reminder]:
        """
        List reminders that have not been claimed yet.

        Args:
            user_id: Only show reminders for this user
            limit: Maximum number of rows

        Returns:
            Pending reminders, soonest first
        """
        try:
            if user_id is not None:
                rows = await self.db.fetch(
                    """
                    SELECT id, user_id, date, message FROM reminders
                    WHERE user_id = $1
                    ORDER BY date ASC
                    LIMIT $2
                    """,
                    user_id,
                    limit,
                )
            else:
                rows = await self.db.fetch(
                    """
                    SELECT id, user_id, date, message FROM reminders
                    ORDER BY date ASC
                    LIMIT $1
                    """,
                    limit,
                )
        except DB_ERRORS as e:
            raise StorageError(f"Failed to list reminders: {e}") from e

        return [Reminder.from_row(row) for row in rows]

    async def count_pending(self, due_by: Optional[datetime] = None) -> int:
        """Count unclaimed reminders, optionally only those due by ``due_by``."""
        try:
            if due_by is not None:
                return await self.db.fetchval(
                    "SELECT COUNT(*) FROM reminders WHERE date <= $1",
                    due_by,
                )
            return await self.db.fetchval("SELECT COUNT(*) FROM reminders")
        except DB_ERRORS as e:
            raise StorageError(f"Failed to count reminders: {e}") from e

"""
Reminder Inspector CLI

Debug tool for looking at reminders that have not been delivered yet.
Read-only: nothing is claimed or deleted.

Usage:
    # List the next pending reminders
    python scripts/reminder_inspector.py list

    # List pending reminders for one user
    python scripts/reminder_inspector.py list --user-id 123456789 --limit 20

    # Show reminder statistics
    python scripts/reminder_inspector.py stats
"""

import argparse
import asyncio
import logging
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import asyncpg
import pytz
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders import ReminderStore  # noqa: E402

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
)
logger = logging.getLogger(__name__)


def format_datetime(dt: datetime) -> str:
    """Format datetime for display."""
    if dt is None:
        return "Never"
    return dt.astimezone(pytz.UTC).strftime("%Y-%m-%d %H:%M:%S")


def truncate(text: str, max_len: int = 80) -> str:
    """Truncate text with ellipsis."""
    if len(text) <= max_len:
        return text
    return text[: max_len - 3] + "..."


async def list_reminders(store: ReminderStore, user_id: Optional[str] = None, limit: int = 50):
    """List pending reminders, soonest first."""
    reminders = await store.list_pending(user_id=user_id, limit=limit)

    if not reminders:
        logger.info("No pending reminders.")
        return

    logger.info(f"\n{'='*80}")
    logger.info(f"Found {len(reminders)} pending reminder(s)")
    logger.info(f"{'='*80}\n")

    for reminder in reminders:
        logger.info(f"[{reminder.id}] due {format_datetime(reminder.due_at)} UTC")
        logger.info(f"    User: {reminder.user_id}")
        logger.info(f"    Message: {truncate(reminder.message, 70) or '(empty)'}")


async def show_stats(store: ReminderStore):
    """Show pending and overdue reminder counts."""
    total = await store.count_pending()
    overdue = await store.count_pending(due_by=datetime.now(pytz.UTC))

    logger.info(f"Pending reminders: {total}")
    logger.info(f"Overdue (waiting for next poll): {overdue}")


async def main():
    parser = argparse.ArgumentParser(description="Reminder inspector")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="List pending reminders")
    list_parser.add_argument("--user-id", help="Filter by Discord user ID")
    list_parser.add_argument("--limit", type=int, default=50, help="Maximum rows")

    subparsers.add_parser("stats", help="Show reminder statistics")

    args = parser.parse_args()

    load_dotenv()
    database_url = os.getenv("DATABASE_URL")
    if not database_url:
        logger.error("DATABASE_URL environment variable not set")
        sys.exit(1)

    pool = await asyncpg.create_pool(database_url, min_size=1, max_size=2)
    try:
        store = ReminderStore(pool)
        if args.command == "list":
            await list_reminders(store, user_id=args.user_id, limit=args.limit)
        elif args.command == "stats":
            await show_stats(store)
    finally:
        await pool.close()


if __name__ == "__main__":
    asyncio.run(main())

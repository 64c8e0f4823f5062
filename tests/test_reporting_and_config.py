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

"""Tests for poll loop reporters, config and the !remindme command."""

import asyncio
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytz

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from commands.remindme_commands import RemindMeCommands
from reminders.config import ReminderConfig
from reminders.errors import DateOverflowError, DeliveryError, StorageError
from reminders.interval_parser import USAGE
from reminders.reporting import AnalyticsReporter, LoggingReporter
from reminders.store import Reminder

REMINDER = Reminder(
    id=3,
    user_id="1234",
    due_at=datetime(2026, 3, 1, 12, 0, tzinfo=pytz.UTC),
    message="call mom",
)


class TestReminderConfig:
    def test_default_config(self):
        config = ReminderConfig()
        assert config.poll_interval_seconds == 60.0
        assert config.command_prefix == "!"
        assert config.analytics_enabled is True

    def test_config_from_env_default(self):
        with patch.dict("os.environ", {}, clear=True):
            config = ReminderConfig.from_env()
            assert config.database_url is None
            assert config.discord_token is None
            assert config.poll_interval_seconds == 60.0
            assert config.db_pool_min_size == 1
            assert config.db_pool_max_size == 5

    def test_config_from_env_custom_values(self):
        with patch.dict("os.environ", {
            "DATABASE_URL": "postgresql://localhost/reminders",
            "REMINDER_POLL_SECONDS": "15",
            "REMINDER_DB_POOL_MAX": "10",
            "ANALYTICS_ENABLED": "false",
            "COMMAND_PREFIX": "?",
        }):
            config = ReminderConfig.from_env()
            assert config.database_url == "postgresql://localhost/reminders"
            assert config.poll_interval_seconds == 15.0
            assert config.db_pool_max_size == 10
            assert config.analytics_enabled is False
            assert config.command_prefix == "?"


class TestLoggingReporter:
    def test_delivery_failure_logged_as_error(self, caplog):
        reporter = LoggingReporter()
        with caplog.at_level(logging.ERROR, logger="remindme.reminders.scheduler"):
            reporter.delivery_failed(REMINDER, DeliveryError("1234", "User has DMs disabled"))
        assert "reminder 3" in caplog.text
        assert "DMs disabled" in caplog.text

    def test_claim_failure_logged_as_error(self, caplog):
        reporter = LoggingReporter()
        with caplog.at_level(logging.ERROR, logger="remindme.reminders.scheduler"):
            reporter.claim_failed(StorageError("connection refused"))
        assert "Failed to get reminders" in caplog.text


class TestAnalyticsReporter:
    @pytest.mark.asyncio
    async def test_records_delivery_event(self):
        pool = MagicMock()
        pool.execute = AsyncMock()
        reporter = AnalyticsReporter(pool)

        reporter.reminder_delivered(REMINDER)
        await asyncio.sleep(0)

        query, name, category, user_id, properties = pool.execute.call_args.args
        assert "INSERT INTO analytics_events" in query
        assert (name, category, user_id) == ("reminder_delivered", "reminder", 1234)
        assert json.loads(properties) == {"reminder_id": 3}

    @pytest.mark.asyncio
    async def test_disabled_records_nothing(self):
        pool = MagicMock()
        pool.execute = AsyncMock()
        reporter = AnalyticsReporter(pool, enabled=False)

        reporter.claim_failed(StorageError("down"))
        await asyncio.sleep(0)

        pool.execute.assert_not_called()
        assert await reporter.track_async("x", "error") is False

    @pytest.mark.asyncio
    async def test_write_failure_is_swallowed(self):
        pool = MagicMock()
        pool.execute = AsyncMock(side_effect=OSError("analytics down"))
        reporter = AnalyticsReporter(pool)

        assert await reporter.track_async("scheduler_error", "error") is False

    @pytest.mark.asyncio
    async def test_pending_write_is_held_until_done(self):
        pool = MagicMock()
        pool.execute = AsyncMock()
        reporter = AnalyticsReporter(pool)

        reporter.reminder_delivered(REMINDER)
        assert len(reporter._pending) == 1

        await asyncio.sleep(0)
        await asyncio.sleep(0)
        assert reporter._pending == set()
        pool.execute.assert_awaited_once()

    def test_no_running_loop_skips_tracking(self):
        pool = MagicMock()
        pool.execute = AsyncMock()
        reporter = AnalyticsReporter(pool)

        reporter.delivery_failed(REMINDER, DeliveryError("1234", "User not found"))

        pool.execute.assert_not_called()


def _ctx(author_id=1234):
    ctx = MagicMock()
    ctx.author.id = author_id
    ctx.send = AsyncMock()
    return ctx


class TestRemindMeCommand:
    @pytest.mark.asyncio
    async def test_replies_with_submit_response(self):
        scheduler = MagicMock()
        scheduler.submit = AsyncMock(return_value="Reminder set for 2026-03-01 12:05:00 UTC.")
        cog = RemindMeCommands(MagicMock(), scheduler)
        ctx = _ctx()

        await cog.remindme.callback(cog, ctx, 5, "minutes", message="call mom")

        scheduler.submit.assert_awaited_once_with(5, "minutes", "call mom", 1234)
        ctx.send.assert_awaited_once_with("Reminder set for 2026-03-01 12:05:00 UTC.")

    @pytest.mark.asyncio
    async def test_overflow_reply(self):
        scheduler = MagicMock()
        scheduler.submit = AsyncMock(side_effect=DateOverflowError("Date overflow"))
        cog = RemindMeCommands(MagicMock(), scheduler)
        ctx = _ctx()

        await cog.remindme.callback(cog, ctx, 4294967295, "weeks")

        assert "too far in the future" in ctx.send.call_args.args[0]

    @pytest.mark.asyncio
    async def test_storage_error_reply(self):
        scheduler = MagicMock()
        scheduler.submit = AsyncMock(side_effect=StorageError("down"))
        cog = RemindMeCommands(MagicMock(), scheduler)
        ctx = _ctx()

        await cog.remindme.callback(cog, ctx, 5, "minutes", message="x")

        assert "went wrong" in ctx.send.call_args.args[0]

    @pytest.mark.asyncio
    async def test_bad_argument_replies_with_usage(self):
        from discord.ext import commands

        cog = RemindMeCommands(MagicMock(), MagicMock())
        ctx = _ctx()

        await cog.remindme_error(ctx, commands.BadArgument("Converting to int failed"))

        ctx.send.assert_awaited_once_with(USAGE)


class TestRemindMeBotClose:
    @pytest.mark.asyncio
    async def test_pool_and_connection_closed_when_scheduler_stop_fails(self):
        from discord.ext import commands

        from remindme_bot import RemindMeBot

        bot = RemindMeBot(ReminderConfig())
        bot.scheduler = MagicMock()
        bot.scheduler.stop = AsyncMock(side_effect=RuntimeError("loop crashed"))
        bot.db_pool = MagicMock()
        bot.db_pool.close = AsyncMock()

        with patch.object(commands.Bot, "close", new_callable=AsyncMock) as base_close:
            with pytest.raises(RuntimeError):
                await bot.close()

        bot.db_pool.close.assert_awaited_once()
        base_close.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_close_before_setup(self):
        from discord.ext import commands

        from remindme_bot import RemindMeBot

        bot = RemindMeBot(ReminderConfig())

        with patch.object(commands.Bot, "close", new_callable=AsyncMock) as base_close:
            await bot.close()

        base_close.assert_awaited_once()

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
Reminders Package

Provides one-shot "remind me in N units" reminders delivered by DM.
"""

from .config import ReminderConfig
from .errors import DateOverflowError, DeliveryError, ReminderError, StorageError
from .interval_parser import USAGE, Interval, ValidationError, parse_interval
from .notifier import DiscordNotifier, Notifier, format_reminder_text
from .reporting import AnalyticsReporter, LoggingReporter, ReminderReporter
from .scheduler import ReminderScheduler
from .store import Reminder, ReminderStore

__all__ = [
    "ReminderConfig",
    "ReminderError",
    "DateOverflowError",
    "StorageError",
    "DeliveryError",
    "USAGE",
    "Interval",
    "ValidationError",
    "parse_interval",
    "Notifier",
    "DiscordNotifier",
    "format_reminder_text",
    "ReminderReporter",
    "LoggingReporter",
    "AnalyticsReporter",
    "ReminderScheduler",
    "Reminder",
    "ReminderStore",
]

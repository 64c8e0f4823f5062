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
Reminder Errors

Exceptions raised by the reminder store and scheduler. Scale validation
problems are not exceptions; see ``interval_parser.ValidationError``.
"""


class ReminderError(Exception):
    """Base class for reminder failures."""

    pass


class DateOverflowError(ReminderError, OverflowError):
    """Raised when ``now + interval`` falls outside the representable range."""

    pass


class StorageError(ReminderError):
    """Raised when the reminders table cannot be read or written."""

    pass


class DeliveryError(ReminderError):
    """
    A reminder could not be delivered.

    Returned (not raised) by notifiers so one unreachable recipient never
    interrupts the rest of a poll tick.
    """

    def __init__(self, user_id: str, reason: str):
        super().__init__(f"Failed to DM user {user_id}: {reason}")
        self.user_id = user_id
        self.reason = reason

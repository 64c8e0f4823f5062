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
Interval Parser Module

Parses the ``x scale`` part of a ``!remindme`` command into an interval.
Only ``minutes``, ``hours``, ``days`` and ``weeks`` are supported, in any
letter case and in singular or plural form.
"""

from dataclasses import dataclass
from datetime import timedelta
from typing import Union

USAGE = (
    "Usage: `!remindme x scale`, where `x` is a number, "
    "and scale is `minutes`, `hours`, `days` or `weeks`."
)

# Accepted scale tokens, mapped to timedelta keyword names
SCALE_UNITS = {
    "minute": "minutes",
    "minutes": "minutes",
    "hour": "hours",
    "hours": "hours",
    "day": "days",
    "days": "days",
    "week": "weeks",
    "weeks": "weeks",
}


@dataclass(frozen=True)
class Interval:
    """A parsed reminder interval, e.g. ``Interval(5, "minutes")``."""

    count: int
    unit: str

    def to_timedelta(self) -> timedelta:
        """
        Build the matching timedelta.

        Raises:
            OverflowError: If the count is too large for a timedelta
        """
        return timedelta(**{self.unit: self.count})


@dataclass(frozen=True)
class ValidationError:
    """User-facing feedback for an interval that could not be parsed."""

    message: str

    def __str__(self) -> str:
        return self.message


def parse_interval(count: int, scale: str) -> Union[Interval, ValidationError]:
    """
    Parse a count and scale token into an interval.

    Args:
        count: Number of units (non-negative)
        scale: Scale token such as "minutes", "Hour" or "WEEKS"

    Returns:
        Interval on success, ValidationError carrying the usage text otherwise
    """
    unit = SCALE_UNITS.get(str(scale).strip().lower())
    if unit is None:
        return ValidationError(f"Invalid duration scale.\n{USAGE}")

    if count < 0:
        return ValidationError(f"Invalid duration count.\n{USAGE}")

    return Interval(count=count, unit=unit)

"""
Domain models for weekly availability, booked intervals and generated slots.
"""

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

import pendulum
from pendulum import Date, DateTime

from .exceptions import InvalidAvailabilityConfig

WEEKDAY_NAMES = (
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

_CLOCK_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})$")


def weekday_name(date: Date) -> str:
    """Return the lowercase English weekday name of a date."""
    return WEEKDAY_NAMES[date.weekday()]


def parse_clock(value: str) -> Tuple[int, int]:
    """
    Parse a 24-hour ``HH:MM`` string into an (hour, minute) pair.

    Raises:
        InvalidAvailabilityConfig: If the value is not a valid wall-clock time
    """
    match = _CLOCK_PATTERN.match(value.strip()) if isinstance(value, str) else None
    if not match:
        raise InvalidAvailabilityConfig(f"Time must use HH:MM format, got {value!r}")

    hour, minute = int(match.group(1)), int(match.group(2))
    if hour > 23 or minute > 59:
        raise InvalidAvailabilityConfig(f"Time out of range: {value!r}")

    return hour, minute


def format_hour_label(hour: int) -> str:
    """Format an hour of the day as a 12-hour clock label, e.g. ``6:00 PM``."""
    hour = hour % 24
    display_hour = hour % 12 or 12
    period = "AM" if hour < 12 else "PM"
    return f"{display_hour}:00 {period}"


def format_short_time(value: str) -> str:
    """Format ``HH:MM`` compactly, e.g. ``09:00`` -> ``9AM``."""
    hour, _ = parse_clock(value)
    period = "PM" if hour >= 12 else "AM"
    return f"{hour % 12 or 12}{period}"


@dataclass(frozen=True)
class TimeRange:
    """
    Represents an immutable time range with start and end datetime.

    Invariant: start must be before end.
    """
    start: DateTime
    end: DateTime

    def __post_init__(self):
        if self.start >= self.end:
            raise ValueError(f"Start time {self.start} must be before end time {self.end}")

    def duration_minutes(self) -> int:
        """Return the duration in minutes."""
        return int((self.end - self.start).total_seconds() / 60)

    def overlaps(self, other: "TimeRange") -> bool:
        """Check if this range overlaps with another. Touching ranges do not overlap."""
        return self.start < other.end and self.end > other.start

    def __str__(self) -> str:
        return f"{self.start.format('DD.MM.YYYY HH:mm')} - {self.end.format('HH:mm')}"


@dataclass(frozen=True)
class TimeSlotRange:
    """A configured wall-clock range within a day, e.g. 09:00 - 18:00."""
    start: str
    end: str


@dataclass(frozen=True)
class DayRule:
    """
    Availability rule for one weekday.
    """
    day_id: str
    available: bool
    time_slot_ranges: Tuple[TimeSlotRange, ...] = ()

    def short_name(self) -> str:
        """Three letter display name, e.g. ``Mon``."""
        return self.day_id[:3].capitalize()


@dataclass
class WeeklyAvailability:
    """
    The weekly schedule of a freelancer.

    A weekday without a rule is closed. An empty schedule has no rules at all
    and therefore yields no slots, but does not close any day on its own.
    """
    rules: List[DayRule] = field(default_factory=list)

    @classmethod
    def from_rules(cls, rules: Sequence[DayRule]) -> "WeeklyAvailability":
        return cls(rules=list(rules))

    def is_empty(self) -> bool:
        return not self.rules

    def rule_for(self, date: Date) -> Optional[DayRule]:
        """Find the rule matching the weekday of ``date`` (case-insensitive)."""
        name = weekday_name(date)
        for rule in self.rules:
            if rule.day_id.lower() == name:
                return rule
        return None

    def is_day_open(self, date: Date) -> bool:
        """Check if the weekday of ``date`` accepts bookings at all."""
        rule = self.rule_for(date)
        return rule is not None and rule.available

    def open_days(self) -> List[DayRule]:
        """Return the available rules in Monday-first order."""
        by_name: Dict[str, DayRule] = {rule.day_id.lower(): rule for rule in self.rules}
        return [
            by_name[name] for name in WEEKDAY_NAMES
            if name in by_name and by_name[name].available
        ]

    def working_hours_text(self) -> str:
        """
        Summarize the schedule for display.

        Format: Mon, Tue, Wed • 9AM - 6PM (hours taken from the first open day)
        """
        open_days = self.open_days()
        if not open_days:
            return "Not available"

        day_names = ", ".join(rule.short_name() for rule in open_days)
        ranges = open_days[0].time_slot_ranges
        if ranges:
            first = ranges[0]
            return f"{day_names} • {format_short_time(first.start)} - {format_short_time(first.end)}"

        return f"{day_names} • 9 AM - 6 PM"


@dataclass(frozen=True, order=True)
class GeneratedSlot:
    """
    A one-hour bookable window on a calendar date.

    ``hour`` is always the wall-clock hour on ``date`` (0-23).
    """
    date: Date
    hour: int

    @property
    def label(self) -> str:
        return format_hour_label(self.hour)

    def time_range(self, timezone: str) -> TimeRange:
        """Absolute interval of the slot in the given timezone."""
        start = pendulum.datetime(
            self.date.year, self.date.month, self.date.day, self.hour, tz=timezone
        )
        return TimeRange(start=start, end=start.add(hours=1))

    def __str__(self) -> str:
        return self.label


@dataclass
class AvailabilitySnapshot:
    """
    Availability data of one freelancer as fetched at a point in time.
    """
    weekly: WeeklyAvailability = field(default_factory=WeeklyAvailability)
    booked: List[TimeRange] = field(default_factory=list)
    paused_dates: List[Date] = field(default_factory=list)

    def is_paused(self, date: Date) -> bool:
        return date in self.paused_dates

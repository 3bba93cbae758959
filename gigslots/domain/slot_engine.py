"""
Core business logic for generating bookable one-hour slots.

This is the heart of the booking flow - pure domain logic without any
external dependencies (no API calls, no database, no I/O).
"""

from typing import Iterable, List, Optional, Set

import pendulum
from pendulum import Date, DateTime

from .models import GeneratedSlot, TimeRange, TimeSlotRange, WeeklyAvailability, parse_clock


class SlotEngine:
    """
    Generates hour-aligned bookable slots for a single calendar date.

    Algorithm:
    1. Find the day rule for the date's weekday (missing or unavailable => closed)
    2. Expand every configured range into whole one-hour slots
    3. Drop slots that overlap an existing booking
    4. Drop slots that have already started when the date is today
    5. Deduplicate and sort by time of day

    Paused dates are not checked here; callers skip paused dates entirely.
    """

    def __init__(self, availability: WeeklyAvailability, timezone: str = "Asia/Kolkata"):
        self.availability = availability
        self.timezone = timezone

    def generate_slots(
        self,
        target_date: Date,
        booked_intervals: Iterable[TimeRange] = (),
        now: Optional[DateTime] = None
    ) -> List[GeneratedSlot]:
        """
        Compute the bookable slots for ``target_date``.

        Args:
            target_date: Calendar date to generate slots for
            booked_intervals: Existing bookings that block slots
            now: Current time, defaults to the wall clock in the engine timezone

        Returns:
            Sorted list of GeneratedSlot objects without duplicates

        Raises:
            InvalidAvailabilityConfig: If a configured range is not HH:MM
        """
        rule = self.availability.rule_for(target_date)

        if not self.availability.is_empty() and (rule is None or not rule.available):
            return []

        ranges = rule.time_slot_ranges if rule is not None else ()

        hours: Set[int] = set()
        for time_range in ranges:
            hours.update(self._expand_range(time_range))

        slots = [GeneratedSlot(date=target_date, hour=hour) for hour in hours]

        booked = list(booked_intervals)
        slots = [slot for slot in slots if not self._collides(slot, booked)]

        now = now if now is not None else pendulum.now(self.timezone)
        local_now = now.in_timezone(self.timezone)
        if local_now.date() == target_date:
            slots = [
                slot for slot in slots
                if slot.time_range(self.timezone).start > local_now
            ]

        return sorted(slots, key=lambda slot: slot.hour)

    def labels_for(
        self,
        target_date: Date,
        booked_intervals: Iterable[TimeRange] = (),
        now: Optional[DateTime] = None
    ) -> List[str]:
        """Return the display labels of the bookable slots for ``target_date``."""
        return [slot.label for slot in self.generate_slots(target_date, booked_intervals, now)]

    def _expand_range(self, time_range: TimeSlotRange) -> List[int]:
        """
        Expand a configured range into the wall-clock hours of its slots.

        Examples:
        09:00 - 12:00 -> [9, 10, 11]
        18:00 - 00:00 -> [18, 19, 20, 21, 22, 23]
        18:00 - 12:00 -> [18, ..., 23]  (an evening start ending at "12" means midnight)
        22:00 - 02:00 -> [22, 23, 0, 1]
        """
        start_hour, start_minute = parse_clock(time_range.start)
        end_hour, end_minute = parse_clock(time_range.end)

        if (end_hour, end_minute) == (0, 0) and end_hour * 60 <= start_hour * 60 + start_minute:
            end_hour = 24

        if start_hour >= 12 and (end_hour, end_minute) == (12, 0):
            end_hour = 24

        if end_hour < start_hour:
            end_hour += 24

        cursor = start_hour + 1 if start_minute > 0 else start_hour
        end_total_minutes = end_hour * 60 + end_minute

        hours: List[int] = []
        while cursor < end_hour:
            if (cursor + 1) * 60 > end_total_minutes:
                break
            hours.append(cursor % 24)
            cursor += 1

        return hours

    def _collides(self, slot: GeneratedSlot, booked: List[TimeRange]) -> bool:
        slot_range = slot.time_range(self.timezone)
        return any(slot_range.overlaps(booking) for booking in booked)

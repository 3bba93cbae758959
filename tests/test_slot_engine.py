"""
Tests for the slot engine.
"""

import pendulum
import pytest

from gigslots.domain.exceptions import InvalidAvailabilityConfig
from gigslots.domain.models import DayRule, TimeRange, TimeSlotRange, WeeklyAvailability
from gigslots.domain.slot_engine import SlotEngine

TZ = "Asia/Kolkata"
MONDAY = pendulum.date(2024, 6, 10)
EARLIER = pendulum.datetime(2024, 6, 1, 8, tz=TZ)


def _engine(*ranges, day_id="monday", available=True, extra_rules=()):
    rule = DayRule(
        day_id=day_id,
        available=available,
        time_slot_ranges=tuple(TimeSlotRange(start, end) for start, end in ranges),
    )
    return SlotEngine(WeeklyAvailability.from_rules([rule, *extra_rules]), timezone=TZ)


def _booking(start, end):
    return TimeRange(start=pendulum.parse(start, tz=TZ), end=pendulum.parse(end, tz=TZ))


class TestSlotEngine:
    """Tests for SlotEngine."""

    def test_example_booking_collision(self):
        """A booking at 10:00 removes only the 10 AM slot."""
        engine = _engine(("09:00", "12:00"))
        booked = [_booking("2024-06-10T10:00", "2024-06-10T11:00")]

        labels = engine.labels_for(MONDAY, booked, now=EARLIER)

        assert labels == ["9:00 AM", "11:00 AM"]

    def test_missing_day_rule_yields_no_slots(self):
        """Weekdays absent from a non-empty schedule are closed."""
        engine = _engine(("09:00", "12:00"), day_id="tuesday")

        assert engine.generate_slots(MONDAY, now=EARLIER) == []

    def test_unavailable_day_yields_no_slots(self):
        engine = _engine(("09:00", "12:00"), available=False)

        assert engine.generate_slots(MONDAY, now=EARLIER) == []

    def test_empty_schedule_yields_no_slots(self):
        """No default business hours are synthesized."""
        engine = SlotEngine(WeeklyAvailability(), timezone=TZ)

        assert engine.generate_slots(MONDAY, now=EARLIER) == []

    def test_midnight_end_wraps_to_end_of_day(self):
        engine = _engine(("18:00", "00:00"))

        labels = engine.labels_for(MONDAY, now=EARLIER)

        assert labels == ["6:00 PM", "7:00 PM", "8:00 PM", "9:00 PM", "10:00 PM", "11:00 PM"]

    def test_noon_end_after_evening_start_means_midnight(self):
        engine = _engine(("18:00", "12:00"))

        labels = engine.labels_for(MONDAY, now=EARLIER)

        assert labels == ["6:00 PM", "7:00 PM", "8:00 PM", "9:00 PM", "10:00 PM", "11:00 PM"]

    def test_overnight_range_stays_on_target_date(self):
        """Hours past midnight are labelled mod 24 and sorted by time of day."""
        engine = _engine(("22:00", "02:00"))

        slots = engine.generate_slots(MONDAY, now=EARLIER)

        assert [slot.hour for slot in slots] == [0, 1, 22, 23]
        assert all(slot.date == MONDAY for slot in slots)

    def test_partial_hours_are_skipped(self):
        """Slots are hour aligned: a 06:30 start begins at 7, a 10:30 end stops at 10."""
        engine = _engine(("06:30", "10:30"))

        labels = engine.labels_for(MONDAY, now=EARLIER)

        assert labels == ["7:00 AM", "8:00 AM", "9:00 AM"]

    def test_overlapping_ranges_are_deduplicated(self):
        engine = _engine(("07:00", "11:00"), ("09:00", "12:00"))

        slots = engine.generate_slots(MONDAY, now=EARLIER)
        hours = [slot.hour for slot in slots]

        assert hours == [7, 8, 9, 10, 11]
        assert len(hours) == len(set(hours))

    def test_ranges_are_sorted_by_time_not_label(self):
        engine = _engine(("13:00", "15:00"), ("09:00", "11:00"))

        labels = engine.labels_for(MONDAY, now=EARLIER)

        assert labels == ["9:00 AM", "10:00 AM", "1:00 PM", "2:00 PM"]

    def test_no_slot_collides_with_any_booking(self):
        engine = _engine(("08:00", "20:00"))
        booked = [
            _booking("2024-06-10T09:30", "2024-06-10T10:15"),
            _booking("2024-06-10T13:00", "2024-06-10T15:00"),
            _booking("2024-06-09T23:00", "2024-06-10T08:30"),
        ]

        slots = engine.generate_slots(MONDAY, booked, now=EARLIER)

        assert [slot.hour for slot in slots] == [11, 12, 15, 16, 17, 18, 19]
        for slot in slots:
            interval = slot.time_range(TZ)
            assert not any(interval.overlaps(b) for b in booked)

    def test_back_to_back_bookings_do_not_block_adjacent_slots(self):
        engine = _engine(("09:00", "12:00"))
        booked = [_booking("2024-06-10T10:00", "2024-06-10T11:00")]

        hours = [slot.hour for slot in engine.generate_slots(MONDAY, booked, now=EARLIER)]

        assert 9 in hours and 11 in hours

    def test_bookings_on_other_dates_are_ignored(self):
        engine = _engine(("09:00", "12:00"))
        booked = [_booking("2024-06-11T09:00", "2024-06-11T12:00")]

        assert len(engine.generate_slots(MONDAY, booked, now=EARLIER)) == 3

    def test_past_slots_are_dropped_for_today(self):
        engine = _engine(("09:00", "18:00"))
        now = pendulum.datetime(2024, 6, 10, 15, 30, tz=TZ)

        labels = engine.labels_for(MONDAY, now=now)

        assert labels == ["4:00 PM", "5:00 PM"]

    def test_slot_starting_exactly_now_is_dropped(self):
        engine = _engine(("09:00", "18:00"))
        now = pendulum.datetime(2024, 6, 10, 16, 0, tz=TZ)

        labels = engine.labels_for(MONDAY, now=now)

        assert labels == ["5:00 PM"]

    def test_now_in_other_timezone_is_converted(self):
        engine = _engine(("09:00", "18:00"))
        now = pendulum.datetime(2024, 6, 10, 10, 0, tz="UTC")  # 15:30 in Kolkata

        labels = engine.labels_for(MONDAY, now=now)

        assert labels == ["4:00 PM", "5:00 PM"]

    def test_malformed_range_raises(self):
        engine = _engine(("9am", "12:00"))

        with pytest.raises(InvalidAvailabilityConfig):
            engine.generate_slots(MONDAY, now=EARLIER)

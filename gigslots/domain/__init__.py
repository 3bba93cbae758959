"""
Domain layer - Pure business logic without external dependencies.
"""

from .date_range_selector import DateRange, DateRangeSelector, SelectionMode
from .models import AvailabilitySnapshot, DayRule, GeneratedSlot, TimeRange, TimeSlotRange, WeeklyAvailability
from .slot_engine import SlotEngine

__all__ = [
    "AvailabilitySnapshot",
    "DateRange",
    "DateRangeSelector",
    "DayRule",
    "GeneratedSlot",
    "SelectionMode",
    "SlotEngine",
    "TimeRange",
    "TimeSlotRange",
    "WeeklyAvailability",
]

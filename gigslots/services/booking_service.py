"""
Application services for the client booking flow.

The service coordinates fetching availability via a client adapter and
delegates slot generation to the domain-level ``SlotEngine``. Pause checks
live here rather than in the engine so both layers can be tested on their
own.
"""

from __future__ import annotations

import asyncio
import logging
import re
import threading
from dataclasses import dataclass
from typing import List, Optional, Protocol

from pendulum import Date, DateTime

from ..domain.exceptions import AvailabilityAPIError, BookingValidationError
from ..domain.models import AvailabilitySnapshot, GeneratedSlot
from ..domain.slot_engine import SlotEngine

logger = logging.getLogger(__name__)

_DURATION_PATTERN = re.compile(r"(\d+)\s*(hour|min|day)")


class AvailabilityClientProtocol(Protocol):
    """Protocol describing the availability client behaviour needed by the service."""

    def fetch_availability(self, freelancer_id: str) -> AvailabilitySnapshot:
        """Return the availability snapshot of a freelancer."""


@dataclass(frozen=True)
class BookingRequest:
    """Booking details handed to the cart/checkout flow."""
    date: Date
    time_slot_label: str
    duration_minutes: int
    location: str
    notes: str = ""

    def to_payload(self) -> dict:
        return {
            "date": self.date.to_date_string(),
            "timeSlotLabel": self.time_slot_label,
            "durationMinutes": self.duration_minutes,
            "location": self.location,
            "notes": self.notes,
        }


class BookingService:
    """
    Orchestrates availability retrieval, date filtering and slot generation.
    """

    def __init__(
        self,
        availability_client: AvailabilityClientProtocol,
        timezone: str = "Asia/Kolkata",
        window_days: int = 7,
        default_duration_minutes: int = 60,
    ) -> None:
        self._availability_client = availability_client
        self.timezone = timezone
        self.window_days = window_days
        self.default_duration_minutes = default_duration_minutes

    async def load(
        self,
        freelancer_id: str,
        cancel_token: Optional[threading.Event] = None,
    ) -> Optional[AvailabilitySnapshot]:
        """
        Fetch the availability snapshot of a freelancer.

        A failed fetch is treated like a freelancer without any configuration.
        Returns None when ``cancel_token`` was set before the result arrived.
        """
        try:
            snapshot = await asyncio.to_thread(
                self._availability_client.fetch_availability, freelancer_id
            )
        except AvailabilityAPIError as exc:
            logger.warning("Availability fetch failed for %s: %s", freelancer_id, exc)
            snapshot = AvailabilitySnapshot()

        if cancel_token is not None and cancel_token.is_set():
            logger.debug("Discarding availability for %s, request was cancelled", freelancer_id)
            return None

        return snapshot

    def is_date_bookable(self, snapshot: AvailabilitySnapshot, date: Date, today: Date) -> bool:
        """
        Check whether a date can be picked at all.

        Past and paused dates never can. With an empty schedule every
        remaining date is pickable (it simply has no slots).
        """
        if date < today or snapshot.is_paused(date):
            return False

        if snapshot.weekly.is_empty():
            return True

        return snapshot.weekly.is_day_open(date)

    def bookable_dates(
        self,
        snapshot: AvailabilitySnapshot,
        today: Date,
        days: Optional[int] = None,
    ) -> List[Date]:
        """Dates offered for booking: the next ``days`` days starting tomorrow."""
        days = self.window_days if days is None else days
        candidates = [today.add(days=offset) for offset in range(1, days + 1)]
        return [date for date in candidates if self.is_date_bookable(snapshot, date, today)]

    def slots_for(
        self,
        snapshot: AvailabilitySnapshot,
        date: Date,
        now: Optional[DateTime] = None,
    ) -> List[GeneratedSlot]:
        """Bookable slots of ``date``; paused dates have none."""
        if snapshot.is_paused(date):
            return []

        engine = SlotEngine(snapshot.weekly, timezone=self.timezone)
        return engine.generate_slots(date, snapshot.booked, now=now)

    def build_booking_request(
        self,
        *,
        date: Optional[Date],
        time_slot_label: Optional[str],
        location: str,
        notes: str = "",
        duration_minutes: Optional[int] = None,
    ) -> BookingRequest:
        """
        Package the chosen slot for the checkout flow.

        Raises:
            BookingValidationError: If date, slot or location is missing
        """
        if date is None:
            raise BookingValidationError("A booking date is required.")
        if not time_slot_label:
            raise BookingValidationError("A time slot is required.")
        if not location or not location.strip():
            raise BookingValidationError("A service location is required.")

        return BookingRequest(
            date=date,
            time_slot_label=time_slot_label,
            duration_minutes=duration_minutes or self.default_duration_minutes,
            location=location.strip(),
            notes=notes.strip(),
        )

    def parse_duration(self, delivery_time: Optional[str]) -> int:
        """
        Derive a session length in minutes from a service's delivery time.

        Example: "2 hours" -> 120, "45 mins" -> 45, "1 day" -> 1440
        """
        if not delivery_time:
            return self.default_duration_minutes

        match = _DURATION_PATTERN.search(delivery_time.lower())
        if not match:
            return self.default_duration_minutes

        value, unit = int(match.group(1)), match.group(2)
        if unit == "hour":
            return value * 60
        if unit == "day":
            return value * 60 * 24
        return value

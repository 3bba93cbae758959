"""
REST client for the marketplace availability endpoints.
"""

import json
import logging
from typing import Any, Dict, List, Sequence

import pendulum
import requests
from pendulum import Date, DateTime

from ..domain.exceptions import AvailabilityAPIError
from ..domain.models import (
    AvailabilitySnapshot,
    DayRule,
    TimeRange,
    TimeSlotRange,
    WeeklyAvailability,
)

logger = logging.getLogger(__name__)

DEFAULT_BOOKING_MINUTES = 60


class AvailabilityClient:
    """
    Client for the freelancer availability API.

    Reads the weekly schedule, booked slots and paused dates of a freelancer
    and submits availability edits made in the calendar.
    """

    AVAILABILITY_PATH = "/api/client/hire/availability"
    PAUSE_PATH = "/api/freelancer/availability/pause"
    WINDOW_PATH = "/api/freelancer/availability/window"

    def __init__(
        self,
        base_url: str,
        timezone: str = "Asia/Kolkata",
        timeout: float = 30,
        session: requests.Session | None = None
    ):
        """
        Initialize the availability client.

        Args:
            base_url: Base URL of the marketplace API
            timezone: IANA timezone that booked slots are converted to
            timeout: Request timeout in seconds
            session: Optional requests session (carries auth cookies)
        """
        self.base_url = base_url.rstrip("/")
        self.timezone = timezone
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {"Content-Type": "application/json"}

    def fetch_availability(self, freelancer_id: str) -> AvailabilitySnapshot:
        """
        Fetch the availability snapshot of a freelancer.

        Raises:
            AvailabilityAPIError: If the API call fails or returns invalid JSON
        """
        url = f"{self.base_url}{self.AVAILABILITY_PATH}"

        try:
            response = self.session.get(
                url,
                params={"freelancerId": freelancer_id},
                headers=self.headers,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()
        except requests.exceptions.RequestException as exc:
            raise AvailabilityAPIError(f"Failed to fetch availability for {freelancer_id}: {exc}") from exc
        except ValueError as exc:
            raise AvailabilityAPIError(f"Availability response is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise AvailabilityAPIError(
                f"Unexpected availability response for {freelancer_id}: {type(data).__name__}"
            )

        return parse_availability_response(data, self.timezone)

    def save_paused_dates(self, paused_dates: Sequence[Date]) -> Dict[str, Any]:
        """Persist the freelancer's paused dates."""
        payload = {"pausedDates": [date.to_date_string() for date in sorted(paused_dates)]}
        return self._post(self.PAUSE_PATH, payload)

    def save_availability_window(self, start: Date, end: Date) -> Dict[str, Any]:
        """Persist the freelancer's overall availability window."""
        payload = {"startDate": start.to_date_string(), "endDate": end.to_date_string()}
        return self._post(self.WINDOW_PATH, payload)

    def _post(self, path: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"

        try:
            response = self.session.post(
                url,
                headers=self.headers,
                json=payload,
                timeout=self.timeout
            )
            response.raise_for_status()
            return response.json()
        except requests.exceptions.RequestException as exc:
            raise AvailabilityAPIError(f"Failed to save availability: {exc}") from exc
        except ValueError as exc:
            raise AvailabilityAPIError(f"Save response is not valid JSON: {exc}") from exc


def parse_availability_response(response_data: Dict[str, Any], timezone: str) -> AvailabilitySnapshot:
    """
    Parse the availability API response into our domain model.

    Response format:
    {
        "availability": [
            {"dayId": "monday", "available": true,
             "timeSlotRanges": [{"start": "09:00", "end": "18:00"}]}
        ],
        "bookedSlots": [
            {"start": "2024-06-10T10:00:00Z", "end": "2024-06-10T11:00:00Z", "duration": 60}
        ],
        "pausedDates": ["2024-06-12"]
    }

    ``id``/``timeSlots`` are accepted as aliases of ``dayId``/``timeSlotRanges``
    and ``availability`` may itself be a JSON encoded string.
    """
    raw_rules = response_data.get("availability") or []
    if isinstance(raw_rules, str):
        try:
            raw_rules = json.loads(raw_rules)
        except ValueError as exc:
            logger.warning("Could not decode availability JSON: %s", exc)
            raw_rules = []
    if not isinstance(raw_rules, list):
        logger.warning("Ignoring availability that is not a list: %r", raw_rules)
        raw_rules = []

    rules = [_parse_day_rule(item) for item in raw_rules if isinstance(item, dict)]

    booked: List[TimeRange] = []
    for item in response_data.get("bookedSlots") or []:
        try:
            booked.append(_parse_booked_slot(item, timezone))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping unparsable booked slot %r: %s", item, exc)

    paused: List[Date] = []
    for value in response_data.get("pausedDates") or []:
        try:
            paused.append(pendulum.from_format(str(value)[:10], "YYYY-MM-DD").date())
        except ValueError as exc:
            logger.warning("Skipping invalid paused date %r: %s", value, exc)

    return AvailabilitySnapshot(
        weekly=WeeklyAvailability.from_rules(rules),
        booked=booked,
        paused_dates=paused,
    )


def _parse_day_rule(item: Dict[str, Any]) -> DayRule:
    day_id = str(item.get("dayId") or item.get("id") or "").lower()
    ranges = item.get("timeSlotRanges")
    if ranges is None:
        ranges = item.get("timeSlots") or []

    slot_ranges: List[TimeSlotRange] = []
    for r in ranges:
        if not isinstance(r, dict):
            logger.warning("Skipping invalid time slot range %r for %s", r, day_id or "unknown day")
            continue
        slot_ranges.append(TimeSlotRange(start=str(r.get("start", "")), end=str(r.get("end", ""))))

    return DayRule(
        day_id=day_id,
        available=bool(item.get("available", False)),
        time_slot_ranges=tuple(slot_ranges),
    )


def _parse_booked_slot(item: Dict[str, Any], timezone: str) -> TimeRange:
    start = _parse_datetime(item["start"], timezone)

    if item.get("end"):
        end = _parse_datetime(item["end"], timezone)
    else:
        end = start.add(minutes=int(item.get("duration") or DEFAULT_BOOKING_MINUTES))

    return TimeRange(start=start, end=end)


def _parse_datetime(datetime_str: str, timezone: str) -> DateTime:
    """
    Parse an ISO 8601 string to a pendulum DateTime in the specified timezone.
    """
    dt = pendulum.parse(datetime_str, tz=timezone)

    if isinstance(dt, DateTime):
        return dt.in_timezone(timezone)

    raise ValueError(f"Could not parse datetime: {datetime_str}")

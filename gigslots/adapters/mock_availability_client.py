"""
Mock availability client for working without a running marketplace API.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence

from pendulum import Date

from ..domain.models import AvailabilitySnapshot
from .availability_client import parse_availability_response

logger = logging.getLogger(__name__)


class MockAvailabilityClient:
    """
    Mock client that simulates the availability API.

    Responses are loaded from mock_availability_data.json, keyed by
    freelancer id. Saved edits are recorded in memory only.
    """

    def __init__(self, timezone: str = "Asia/Kolkata", data_file: Path | None = None):
        """
        Initialize the mock client.

        Args:
            timezone: IANA timezone that booked slots are converted to
            data_file: Optional JSON file overriding the bundled mock data
        """
        self.timezone = timezone
        self.data_file = data_file or Path(__file__).parent / "mock_availability_data.json"
        self.saved: List[Dict[str, Any]] = []
        self._load_data()

    def _load_data(self) -> None:
        """Load mock availability responses from JSON file."""
        if self.data_file.exists():
            with open(self.data_file, "r", encoding="utf-8") as f:
                self.responses = json.load(f)
        else:
            logger.warning("Mock data file %s not found, using empty data", self.data_file)
            self.responses = {}

    def fetch_availability(self, freelancer_id: str) -> AvailabilitySnapshot:
        """Return the snapshot stored for ``freelancer_id`` (empty if unknown)."""
        data = self.responses.get(freelancer_id, {})
        return parse_availability_response(data, self.timezone)

    def save_paused_dates(self, paused_dates: Sequence[Date]) -> Dict[str, Any]:
        payload = {"pausedDates": [date.to_date_string() for date in sorted(paused_dates)]}
        self.saved.append(payload)
        return {"success": True, **payload}

    def save_availability_window(self, start: Date, end: Date) -> Dict[str, Any]:
        payload = {"startDate": start.to_date_string(), "endDate": end.to_date_string()}
        self.saved.append(payload)
        return {"success": True, **payload}

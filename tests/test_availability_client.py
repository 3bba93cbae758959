"""
Tests for the availability API adapters.
"""

from unittest.mock import MagicMock

import pendulum
import pytest
import requests

from gigslots.adapters.availability_client import AvailabilityClient, parse_availability_response
from gigslots.adapters.mock_availability_client import MockAvailabilityClient
from gigslots.domain.exceptions import AvailabilityAPIError
from gigslots.domain.models import TimeSlotRange

TZ = "Asia/Kolkata"


def _client(response=None, error=None):
    session = MagicMock(spec=requests.Session)
    if error is not None:
        session.get.side_effect = error
        session.post.side_effect = error
    else:
        session.get.return_value = response
        session.post.return_value = response
    return AvailabilityClient("https://api.example.com/", timezone=TZ, session=session), session


class TestParseAvailabilityResponse:
    """Tests for parse_availability_response."""

    def test_parses_rules_bookings_and_paused_dates(self):
        snapshot = parse_availability_response(
            {
                "availability": [
                    {"dayId": "monday", "available": True,
                     "timeSlotRanges": [{"start": "09:00", "end": "12:00"}]},
                ],
                "bookedSlots": [
                    {"start": "2024-06-10T04:30:00Z", "end": "2024-06-10T05:30:00Z"},
                ],
                "pausedDates": ["2024-06-12"],
            },
            TZ,
        )

        rule = snapshot.weekly.rules[0]
        assert rule.day_id == "monday"
        assert rule.time_slot_ranges[0].start == "09:00"
        assert snapshot.booked[0].start == pendulum.datetime(2024, 6, 10, 10, tz=TZ)
        assert snapshot.paused_dates == [pendulum.date(2024, 6, 12)]

    def test_legacy_keys_and_string_payload(self):
        snapshot = parse_availability_response(
            {"availability": '[{"id": "Sunday", "available": true, "timeSlots": [{"id": "1", "start": "08:00", "end": "17:00"}]}]'},
            TZ,
        )

        assert snapshot.weekly.rules[0].day_id == "sunday"
        assert snapshot.weekly.is_day_open(pendulum.date(2024, 6, 16))

    def test_booking_without_end_uses_duration(self):
        snapshot = parse_availability_response(
            {"bookedSlots": [
                {"start": "2024-06-11T14:00:00+05:30", "duration": 90},
                {"start": "2024-06-11T18:00:00+05:30"},
            ]},
            TZ,
        )

        assert [b.duration_minutes() for b in snapshot.booked] == [90, 60]

    def test_invalid_entries_are_skipped(self):
        snapshot = parse_availability_response(
            {"bookedSlots": [{"end": "2024-06-11T14:00:00"}], "pausedDates": ["soon"]},
            TZ,
        )

        assert snapshot.booked == []
        assert snapshot.paused_dates == []
        assert snapshot.weekly.is_empty()

    def test_non_dict_time_ranges_are_skipped(self):
        snapshot = parse_availability_response(
            {"availability": [
                {"dayId": "monday", "available": True,
                 "timeSlotRanges": ["09:00-12:00", {"start": "14:00", "end": "16:00"}]},
            ]},
            TZ,
        )

        assert snapshot.weekly.rules[0].time_slot_ranges == (TimeSlotRange("14:00", "16:00"),)

    def test_availability_of_wrong_type_is_ignored(self):
        snapshot = parse_availability_response({"availability": "42"}, TZ)

        assert snapshot.weekly.is_empty()


class TestAvailabilityClient:
    """Tests for AvailabilityClient."""

    def test_fetch_availability(self):
        response = MagicMock()
        response.json.return_value = {"availability": [], "bookedSlots": [], "pausedDates": []}
        client, session = _client(response)

        snapshot = client.fetch_availability("fl-1")

        assert snapshot.weekly.is_empty()
        session.get.assert_called_once()
        args, kwargs = session.get.call_args
        assert args[0] == "https://api.example.com/api/client/hire/availability"
        assert kwargs["params"] == {"freelancerId": "fl-1"}

    def test_fetch_failure_raises_api_error(self):
        client, _ = _client(error=requests.exceptions.ConnectionError("offline"))

        with pytest.raises(AvailabilityAPIError, match="offline"):
            client.fetch_availability("fl-1")

    @pytest.mark.parametrize("body", [[], "ok", None])
    def test_non_object_response_raises_api_error(self, body):
        response = MagicMock()
        response.json.return_value = body
        client, _ = _client(response)

        with pytest.raises(AvailabilityAPIError, match="Unexpected availability response"):
            client.fetch_availability("fl-1")

    def test_save_paused_dates(self):
        response = MagicMock()
        response.json.return_value = {"success": True}
        client, session = _client(response)

        client.save_paused_dates([pendulum.date(2024, 6, 12), pendulum.date(2024, 6, 10)])

        _, kwargs = session.post.call_args
        assert kwargs["json"] == {"pausedDates": ["2024-06-10", "2024-06-12"]}

    def test_save_window_failure_raises_api_error(self):
        client, _ = _client(error=requests.exceptions.Timeout("slow"))

        with pytest.raises(AvailabilityAPIError):
            client.save_availability_window(pendulum.date(2024, 6, 10), pendulum.date(2024, 6, 30))


class TestMockAvailabilityClient:
    """Tests for MockAvailabilityClient."""

    def test_bundled_data(self):
        client = MockAvailabilityClient(timezone=TZ)

        snapshot = client.fetch_availability("fl-coach-01")

        assert len(snapshot.weekly.rules) == 7
        assert snapshot.is_paused(pendulum.date(2024, 6, 13))

    def test_unknown_freelancer_is_empty(self):
        snapshot = MockAvailabilityClient(timezone=TZ).fetch_availability("nobody")

        assert snapshot.weekly.is_empty()

    def test_saves_are_recorded(self):
        client = MockAvailabilityClient(timezone=TZ)

        client.save_availability_window(pendulum.date(2024, 6, 10), pendulum.date(2024, 6, 30))

        assert client.saved == [{"startDate": "2024-06-10", "endDate": "2024-06-30"}]

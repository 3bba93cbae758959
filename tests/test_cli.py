"""
Tests for the Typer CLI using the bundled mock data.
"""

import pendulum
from typer.testing import CliRunner

from gigslots import __version__
from gigslots.cli.app import app

runner = CliRunner()


def _future(days: int) -> str:
    return pendulum.today("Asia/Kolkata").add(days=days).to_date_string()


def _next_monday() -> str:
    today = pendulum.today("Asia/Kolkata")
    return today.add(days=(7 - today.weekday()) % 7 or 7).to_date_string()


def test_slots_with_mock_data():
    result = runner.invoke(app, ["slots", "fl-coach-01", "--date", _next_monday(), "--mock"])

    assert result.exit_code == 0
    assert "9 slot(s)" in result.output
    assert "9:00 AM" in result.output
    assert "12:00 PM" not in result.output
    assert "11:00 PM" in result.output


def test_slots_on_past_date_are_not_offered():
    result = runner.invoke(app, ["slots", "fl-coach-01", "--date", "2024-06-10", "--mock"])

    assert result.exit_code == 0
    assert "not bookable" in result.output
    assert "in the past" in result.output
    assert "9:00 AM" not in result.output


def test_slots_beyond_booking_window_are_not_offered():
    result = runner.invoke(app, ["slots", "fl-coach-01", "--date", _future(30), "--mock"])

    assert result.exit_code == 0
    assert "booking window" in result.output


def test_slots_on_closed_day():
    today = pendulum.today("Asia/Kolkata")
    sunday = today.add(days=(6 - today.weekday()) % 7 or 7).to_date_string()

    result = runner.invoke(app, ["slots", "fl-coach-01", "--date", sunday, "--mock"])

    assert result.exit_code == 0
    assert "does not work" in result.output


def test_slots_rejects_bad_date():
    result = runner.invoke(app, ["slots", "fl-coach-01", "--date", "10/06/2024", "--mock"])

    assert result.exit_code == 1


def test_hours_for_mock_freelancer():
    result = runner.invoke(app, ["hours", "fl-umpire-02", "--mock"])

    assert result.exit_code == 0
    assert "Sat, Sun • 8AM - 5PM" in result.output


def test_calendar_renders_month():
    result = runner.invoke(app, ["calendar", "--month", "2024-06", "--months", "1"])

    assert result.exit_code == 0
    assert "June 2024" in result.output


def test_pause_fills_range():
    result = runner.invoke(app, ["pause", _future(2), _future(4)])

    assert result.exit_code == 0
    assert "3 dates paused" in result.output


def test_extend_swaps_dates():
    result = runner.invoke(app, ["extend", _future(5), _future(2), "--save", "--mock"])

    assert result.exit_code == 0
    assert "4 days selected" in result.output
    assert "saved" in result.output


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert __version__ in result.output

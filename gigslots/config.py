"""
Configuration management using Pydantic models loaded from YAML.
"""

from pathlib import Path
from typing import List

import yaml
from pydantic import BaseModel, Field, field_validator

from .domain.exceptions import InvalidAvailabilityConfig
from .domain.models import WEEKDAY_NAMES, DayRule, TimeSlotRange, WeeklyAvailability, parse_clock


class TimeSlotRangeConfig(BaseModel):
    """A configured HH:MM range."""
    start: str
    end: str

    @field_validator("start", "end")
    @classmethod
    def validate_clock(cls, value: str) -> str:
        """Reject anything that is not a 24-hour HH:MM time."""
        try:
            parse_clock(value)
        except InvalidAvailabilityConfig as exc:
            raise ValueError(str(exc)) from exc
        return value.strip()


class DayRuleConfig(BaseModel):
    """Availability of one weekday."""
    day_id: str
    available: bool = True
    time_slot_ranges: List[TimeSlotRangeConfig] = Field(default_factory=list)

    @field_validator("day_id")
    @classmethod
    def validate_day_id(cls, value: str) -> str:
        """Day ids are lowercase English weekday names."""
        day_id = value.strip().lower()
        if day_id not in WEEKDAY_NAMES:
            raise ValueError(f"day_id must be a weekday name, got {value!r}")
        return day_id

    def to_domain(self) -> DayRule:
        return DayRule(
            day_id=self.day_id,
            available=self.available,
            time_slot_ranges=tuple(
                TimeSlotRange(start=r.start, end=r.end) for r in self.time_slot_ranges
            ),
        )


def _default_week() -> List[DayRuleConfig]:
    """Monday to Friday 09:00 - 18:00, weekends closed."""
    week: List[DayRuleConfig] = []
    for name in WEEKDAY_NAMES:
        if name in ("saturday", "sunday"):
            week.append(DayRuleConfig(day_id=name, available=False))
        else:
            week.append(DayRuleConfig(
                day_id=name,
                time_slot_ranges=[TimeSlotRangeConfig(start="09:00", end="18:00")],
            ))
    return week


class BookingDefaults(BaseModel):
    """Defaults for the client booking flow."""
    window_days: int = 7
    default_duration_minutes: int = 60

    @field_validator("window_days", "default_duration_minutes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Ensure the value is positive."""
        if value <= 0:
            raise ValueError("value must be greater than zero")
        return value


class CalendarDefaults(BaseModel):
    """Pagination settings of the availability calendar."""
    initial_months: int = 6
    months_per_page: int = 3
    scroll_threshold_px: int = 100


class AppConfig(BaseModel):
    """Application configuration."""
    api_base_url: str = "http://localhost:3000"
    timezone: str = "Asia/Kolkata"
    request_timeout: float = 30
    booking: BookingDefaults = Field(default_factory=BookingDefaults)
    calendar: CalendarDefaults = Field(default_factory=CalendarDefaults)
    default_availability: List[DayRuleConfig] = Field(default_factory=_default_week)

    @field_validator("request_timeout")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("request_timeout must be greater than zero")
        return value

    @field_validator("default_availability")
    @classmethod
    def validate_unique_days(cls, value: List[DayRuleConfig]) -> List[DayRuleConfig]:
        """Ensure each weekday is configured at most once."""
        seen: set[str] = set()
        for rule in value:
            if rule.day_id in seen:
                raise ValueError(f"Duplicate day rule detected: {rule.day_id}")
            seen.add(rule.day_id)
        return value

    def weekly_availability(self) -> WeeklyAvailability:
        """Build the domain schedule from the configured default availability."""
        return WeeklyAvailability.from_rules(
            [rule.to_domain() for rule in self.default_availability]
        )

    @classmethod
    def load_from_yaml(cls, config_path: Path) -> "AppConfig":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to the YAML config file

        Returns:
            AppConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config is invalid
        """
        if not config_path.exists():
            raise FileNotFoundError(
                f"Config file not found: {config_path}\n"
                f"Please create a config.yaml file. See config.example.yaml for reference."
            )

        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ValueError(f"Invalid YAML in {config_path}: {exc}") from exc

        if not isinstance(data, dict):
            raise ValueError("Config file must contain a mapping at the root level.")

        return cls(**data)


def get_default_config_path() -> Path:
    """Get the default configuration file path."""
    # Look for config.yaml in current directory
    current_dir = Path.cwd()
    config_path = current_dir / "config.yaml"

    if not config_path.exists():
        # Try in the project root (parent of gigslots/)
        project_root = Path(__file__).parent.parent
        config_path = project_root / "config.yaml"

    return config_path


def load_config(config_path: Path | None = None) -> AppConfig:
    """Load the config file, falling back to defaults when none exists."""
    path = config_path or get_default_config_path()
    if config_path is None and not path.exists():
        return AppConfig()
    return AppConfig.load_from_yaml(path)

"""
Domain-specific exception hierarchy for the gigslots application.
"""


class GigSlotsError(Exception):
    """Base class for all application-level errors."""


class InvalidAvailabilityConfig(GigSlotsError):
    """Raised when a day rule carries a time range that is not HH:MM."""


class AvailabilityAPIError(GigSlotsError):
    """Raised when availability data cannot be fetched, parsed or saved."""


class IncompleteSelectionError(GigSlotsError):
    """Raised when a calendar selection is applied before it is complete."""


class BookingValidationError(GigSlotsError):
    """Raised when a booking request is missing required details."""

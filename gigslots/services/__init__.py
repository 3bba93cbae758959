"""
Service layer helpers that orchestrate adapters and domain logic.
"""

from .booking_service import AvailabilityClientProtocol, BookingRequest, BookingService

__all__ = ["AvailabilityClientProtocol", "BookingRequest", "BookingService"]

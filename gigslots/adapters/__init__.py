"""
Adapters layer - External integrations (marketplace REST API).
"""

from .availability_client import AvailabilityClient
from .mock_availability_client import MockAvailabilityClient

__all__ = ["AvailabilityClient", "MockAvailabilityClient"]

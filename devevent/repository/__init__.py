"""Repository layer for database operations.

This module contains concrete repository implementations for
data access operations.
"""

from .booking_repository import BookingRepository
from .event_repository import EventRepository

__all__ = ["BookingRepository", "EventRepository"]

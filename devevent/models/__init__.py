"""
SQLAlchemy models for the DevEvent listing and booking API.
"""

from .base import Base
from .booking import Booking
from .event import Event

__all__: list[str] = ["Base", "Booking", "Event"]

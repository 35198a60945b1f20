"""
Booking model for visitors reserving a spot at an event.
"""

from sqlalchemy import Column, ForeignKey, Integer, String, Text

from .base import Base, TimestampMixin, isoformat_or_none


class Booking(Base, TimestampMixin):
    """
    Booking model. Holds a back-reference to the event, never owns it.

    Attributes:
        id: Unique identifier for the booking
        event_id: Referenced event
        slug: Slug of the referenced event at the time the reference was checked
        email: Lowercased, trimmed email of the visitor
    """

    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    event_id = Column(
        Integer, ForeignKey("events.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    slug = Column(String(255), nullable=False, index=True)
    email = Column(Text, nullable=False)

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event_id={self.event_id}, email='{self.email}')>"

    def to_dict(self) -> dict:
        """Convert booking object to dictionary."""
        return {
            "id": self.id,
            "event_id": self.event_id,
            "slug": self.slug,
            "email": self.email,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }

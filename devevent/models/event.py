"""
Event model for storing published events.
"""

from sqlalchemy import Column, Integer, String, Text

from devevent.core.normalization import expand_legacy_array

from .base import Base, JSONList, TimestampMixin, isoformat_or_none


class Event(Base, TimestampMixin):
    """
    Event model representing a published event.

    Attributes:
        id: Unique identifier for the event
        title: Title of the event
        slug: URL identifier derived from the title (unique)
        description: Short description shown in listings
        overview: Long-form overview shown on the detail page
        image: Public URL of the uploaded banner
        venue: Venue name
        location: City / address
        date: Calendar date, ``YYYY-MM-DD``
        time: Start time, 24-hour ``HH:MM``
        mode: Attendance mode (online, offline, hybrid)
        audience: Intended audience
        agenda: Ordered agenda items
        organizer: Organizer description
        tags: Ordered tags, used for similar-event matching
        created_at: Timestamp when the event was created
        updated_at: Timestamp when the event was last updated
    """

    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(Text, nullable=False)
    slug = Column(String(255), nullable=False, unique=True, index=True)
    description = Column(Text, nullable=False)
    overview = Column(Text, nullable=False)
    image = Column(Text, nullable=False)
    venue = Column(Text, nullable=False)
    location = Column(Text, nullable=False)
    date = Column(String(10), nullable=False)
    time = Column(String(5), nullable=False)
    mode = Column(Text, nullable=False)
    audience = Column(Text, nullable=False)
    agenda = Column(JSONList, nullable=False)
    organizer = Column(Text, nullable=False)
    tags = Column(JSONList, nullable=False)

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, slug='{self.slug}', date={self.date})>"

    @property
    def agenda_items(self) -> list[str]:
        return expand_legacy_array(self.agenda)

    @property
    def tag_items(self) -> list[str]:
        return expand_legacy_array(self.tags)

    def to_dict(self) -> dict:
        """Convert event object to dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "description": self.description,
            "overview": self.overview,
            "image": self.image,
            "venue": self.venue,
            "location": self.location,
            "date": self.date,
            "time": self.time,
            "mode": self.mode,
            "audience": self.audience,
            "agenda": self.agenda_items,
            "organizer": self.organizer,
            "tags": self.tag_items,
            "created_at": isoformat_or_none(self.created_at),
            "updated_at": isoformat_or_none(self.updated_at),
        }

    def to_summary_dict(self) -> dict:
        """Convert event object to summary dictionary (for cards and lists)."""
        return {
            "id": self.id,
            "title": self.title,
            "slug": self.slug,
            "image": self.image,
            "location": self.location,
            "date": self.date,
            "time": self.time,
            "mode": self.mode,
            "tags": self.tag_items,
        }

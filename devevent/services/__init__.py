"""Domain services: record managers, similarity query and image upload."""

from .booking_manager import BookingManager
from .event_manager import EventManager, validate_and_normalize
from .image_upload import CloudinaryImageUploader, ImageUploader, validate_image
from .similarity import find_similar_events

__all__ = [
    "BookingManager",
    "CloudinaryImageUploader",
    "EventManager",
    "ImageUploader",
    "find_similar_events",
    "validate_and_normalize",
    "validate_image",
]

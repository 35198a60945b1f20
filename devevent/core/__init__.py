"""
Core infrastructure components for the application.

This module contains the store handle, base repository, input
normalization and validation helpers, and the error hierarchy.
"""

from .base_repository import BaseRepository
from .database import AsyncDBPool

__all__ = [
    "AsyncDBPool",
    "BaseRepository",
]

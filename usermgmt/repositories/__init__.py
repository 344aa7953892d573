"""Repository layer for database operations"""

from .base import BaseRepository
from .user import PUBLIC_PROJECTION, UserRepository

__all__ = [
    "BaseRepository",
    "PUBLIC_PROJECTION",
    "UserRepository",
]

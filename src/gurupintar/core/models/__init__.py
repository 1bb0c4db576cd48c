"""
GuruPintar SQLAlchemy Models

The relational store only backs the key-value snapshot storage.
"""

from .base import Base, TimestampMixin
from .storage import StorageEntry

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    # Storage
    "StorageEntry",
]

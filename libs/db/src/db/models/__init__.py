"""SQLAlchemy models for the workspace database.

Currently holds the key-value table used by ``gofinances`` storage.
"""

from .storage import Base, GfStorageEntry

__all__ = [
    "Base",
    "GfStorageEntry",
]

"""Collaborator implementations; add new stores and channels here."""

from record_export.stores.base import BlobStore, NotificationChannel, StructuredStore
from record_export.stores.memory import MemoryBlobStore, MemoryChannel, MemoryStore

__all__ = [
    "BlobStore",
    "NotificationChannel",
    "StructuredStore",
    "MemoryBlobStore",
    "MemoryChannel",
    "MemoryStore",
]

"""Abstract collaborators the export pipeline reads from and writes to."""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

from record_export.errors import StorageWriteError
from record_export.models import Record

ContinuationToken = Any


class StructuredStore(ABC):
    @abstractmethod
    def scan_page(
        self, token: Optional[ContinuationToken] = None, limit: Optional[int] = None
    ) -> Tuple[List[Record], Optional[ContinuationToken]]:
        """Return one page of records and the token for the next page (None when exhausted)."""
        ...

    def describe(self) -> str:
        return type(self).__name__


class BlobStore(ABC):
    @abstractmethod
    def put(self, key: str, content: bytes, content_type: str) -> str:
        """Persist content under key and return a reference to it."""
        ...

    @abstractmethod
    def public_url(self, key: str) -> str:
        ...

    def sign_url(self, key: str, ttl_seconds: int) -> str:
        """Return a URL valid for ttl_seconds. Optional capability."""
        raise StorageWriteError(f"{type(self).__name__} does not support signed URLs")


class NotificationChannel(ABC):
    @abstractmethod
    def publish(self, subject: str, text_body: str, structured_body: Dict[str, Any]) -> None:
        """Deliver a notification. Must raise NotificationError on failure."""
        ...

"""In-memory collaborators for tests and local dry runs."""

import copy
from typing import Any, Dict, List, Optional, Tuple

from record_export.errors import NotificationError, StorageWriteError, StoreUnavailable
from record_export.models import Record
from record_export.stores.base import BlobStore, NotificationChannel, StructuredStore

DEFAULT_PAGE_SIZE = 100


class MemoryStore(StructuredStore):
    """Serves records in fixed-size pages; the continuation token is an offset."""

    def __init__(
        self,
        records: Optional[List[Record]] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        fail_on_page: Optional[int] = None,
    ):
        self.records = list(records or [])
        self.page_size = page_size
        self.fail_on_page = fail_on_page
        self.pages_served = 0

    def scan_page(
        self, token: Optional[int] = None, limit: Optional[int] = None
    ) -> Tuple[List[Record], Optional[int]]:
        if self.fail_on_page is not None and self.pages_served == self.fail_on_page:
            raise StoreUnavailable("memory store is offline")
        start = token or 0
        end = start + (limit or self.page_size)
        self.pages_served += 1
        page = copy.deepcopy(self.records[start:end])
        return page, (end if end < len(self.records) else None)


class MemoryBlobStore(BlobStore):
    def __init__(self, base_url: str = "memory://exports", fail_writes: bool = False):
        self.base_url = base_url.rstrip("/")
        self.fail_writes = fail_writes
        self.objects: Dict[str, bytes] = {}
        self.content_types: Dict[str, str] = {}

    def put(self, key: str, content: bytes, content_type: str) -> str:
        if self.fail_writes:
            raise StorageWriteError(f"write rejected for {key}")
        self.objects[key] = content
        self.content_types[key] = content_type
        return key

    def public_url(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def sign_url(self, key: str, ttl_seconds: int) -> str:
        return f"{self.base_url}/{key}?expires={ttl_seconds}"


class MemoryChannel(NotificationChannel):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.published: List[Dict[str, Any]] = []

    def publish(self, subject: str, text_body: str, structured_body: Dict[str, Any]) -> None:
        if self.fail:
            raise NotificationError("notification channel refused the message")
        self.published.append(
            {"subject": subject, "text": text_body, "payload": structured_body}
        )

"""Exhaustive paginated read of a structured store."""

import logging
from collections.abc import Mapping
from typing import List, Optional

from record_export.errors import StoreError
from record_export.models import Record
from record_export.stores.base import StructuredStore

logger = logging.getLogger(__name__)


class RecordFetcher:
    """Collects every record of a store by following continuation tokens.

    A failure on any page discards the pages already read and propagates, so the
    caller sees either the whole record set or an error. Pages are not read from a
    single snapshot: records written during the scan may or may not appear.
    """

    def __init__(self, store: StructuredStore, page_size: Optional[int] = None):
        self._store = store
        self._page_size = page_size

    def fetch_all(self) -> List[Record]:
        logger.info("Scanning %s", self._store.describe())
        records: List[Record] = []
        token = None
        pages = 0
        while True:
            page, token = self._store.scan_page(token, self._page_size)
            pages += 1
            records.extend(self._validate_page(page, pages))
            logger.debug("Page %d: %d records (more=%s)", pages, len(page), token is not None)
            if token is None:
                break

        logger.info("Retrieved %d records in %d page(s)", len(records), pages)
        return records

    @staticmethod
    def _validate_page(page, page_number: int) -> List[Record]:
        if not isinstance(page, list):
            raise StoreError(f"Page {page_number} is not a list of records")
        for item in page:
            if not isinstance(item, Mapping):
                raise StoreError(
                    f"Page {page_number} contains a non-record item: {type(item).__name__}"
                )
        return [dict(item) for item in page]

"""Orchestrator: fetch, encode, store and announce one export."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from record_export.encoder import CONTENT_TYPE, encode_bytes
from record_export.errors import ConfigurationError
from record_export.fetcher import RecordFetcher
from record_export.models import ArtifactReference, ExportOutcome, iso_timestamp
from record_export.reference import ReferencePolicy, TimeLimitedReference
from record_export.schema import derive_schema
from record_export.stores.base import BlobStore, NotificationChannel, StructuredStore

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Todo Export Complete"


class Stage(Enum):
    START = "start"
    FETCHED = "fetched"
    EMPTY_EXIT = "empty-exit"
    ENCODED = "encoded"
    STORED = "stored"
    NOTIFIED = "notified"
    DONE = "done"
    FAILED = "failed"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def artifact_key(prefix: str, moment: datetime) -> str:
    """e.g. todo-export-2024-05-01T12-30-45-123Z.csv"""
    stamp = iso_timestamp(moment).replace(":", "-").replace(".", "-")
    return f"{prefix}-{stamp}.csv"


def build_notification(
    subject: str, key: str, reference: ArtifactReference, moment: datetime
) -> Tuple[str, Dict[str, Any]]:
    """Return the text body and the structured body for a completed export."""
    lines = [
        "Your export has been completed successfully.",
        "",
        f"File: {key}",
        f"Download URL: {reference.url}",
    ]
    if reference.time_limited:
        lines.append(f"This link expires at {iso_timestamp(reference.expires_at)}.")
    else:
        lines.append("This link does not expire.")
    lines += ["", "The export contains all items from the table in CSV format."]
    text = "\n".join(lines)

    structured: Dict[str, Any] = {
        "subject": subject,
        "message": text,
        "fileName": key,
        "downloadUrl": reference.url,
        "timestamp": iso_timestamp(moment),
    }
    if reference.time_limited:
        structured["expiresAt"] = iso_timestamp(reference.expires_at)
    return text, structured


class ExportCoordinator:
    def __init__(
        self,
        store: StructuredStore,
        blob_store: BlobStore,
        notifier: NotificationChannel,
        reference_policy: Optional[ReferencePolicy] = None,
        key_prefix: str = "todo-export",
        subject: str = DEFAULT_SUBJECT,
        page_size: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._fetcher = RecordFetcher(store, page_size)
        self._blob_store = blob_store
        self._notifier = notifier
        self._policy = reference_policy or TimeLimitedReference()
        self._prefix = key_prefix
        self._subject = subject
        self._clock = clock

    def run_export(self) -> ExportOutcome:
        """Run one export. Returns a failure outcome instead of raising, except on misconfiguration."""
        stage = self._enter(Stage.START)
        try:
            records = self._fetcher.fetch_all()
            stage = self._enter(Stage.FETCHED)
            if not records:
                logger.info("No items found in the table")
                self._enter(Stage.EMPTY_EXIT)
                return ExportOutcome.empty()

            schema = derive_schema(records)
            logger.info("CSV headers: %s", ", ".join(schema))
            content = encode_bytes(records, schema)
            stage = self._enter(Stage.ENCODED)

            now = self._clock()
            key = artifact_key(self._prefix, now)
            self._blob_store.put(key, content, CONTENT_TYPE)
            reference = self._policy.reference(self._blob_store, key, now)
            stage = self._enter(Stage.STORED)
            logger.info("Stored %s (%d bytes). Download URL: %s", key, len(content), reference.url)

            text, structured = build_notification(self._subject, key, reference, self._clock())
            self._notifier.publish(self._subject, text, structured)
            self._enter(Stage.NOTIFIED)

            self._enter(Stage.DONE)
            return ExportOutcome.exported(key, reference)
        except ConfigurationError:
            raise
        except Exception as exc:
            logger.error("Export failed after stage %s", stage.value, exc_info=True)
            self._enter(Stage.FAILED)
            return ExportOutcome.failed(str(exc) or type(exc).__name__)

    @staticmethod
    def _enter(stage: Stage) -> Stage:
        logger.info("Export stage: %s", stage.value)
        return stage

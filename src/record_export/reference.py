"""Retrieval URL policies for stored artifacts."""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta

from record_export.config import DEFAULT_URL_TTL_SECONDS, ExportConfig
from record_export.errors import ConfigurationError
from record_export.models import ArtifactReference
from record_export.stores.base import BlobStore


class ReferencePolicy(ABC):
    @abstractmethod
    def reference(self, blob_store: BlobStore, key: str, now: datetime) -> ArtifactReference:
        ...


class PermanentReference(ReferencePolicy):
    def reference(self, blob_store: BlobStore, key: str, now: datetime) -> ArtifactReference:
        return ArtifactReference(url=blob_store.public_url(key))


class TimeLimitedReference(ReferencePolicy):
    def __init__(self, ttl_seconds: int = DEFAULT_URL_TTL_SECONDS):
        if ttl_seconds <= 0:
            raise ConfigurationError("Signed URL lifetime must be positive")
        self.ttl_seconds = ttl_seconds

    def reference(self, blob_store: BlobStore, key: str, now: datetime) -> ArtifactReference:
        url = blob_store.sign_url(key, self.ttl_seconds)
        return ArtifactReference(url=url, expires_at=now + timedelta(seconds=self.ttl_seconds))


def build_reference_policy(config: ExportConfig) -> ReferencePolicy:
    if config.url_policy == "permanent":
        return PermanentReference()
    if config.url_policy == "signed":
        return TimeLimitedReference(config.url_ttl_seconds)
    raise ConfigurationError(f"Unknown URL policy: {config.url_policy!r}")

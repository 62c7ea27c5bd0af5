"""Exception taxonomy for the export pipeline."""


class ExportError(Exception):
    """Base class for export pipeline errors."""


class ConfigurationError(ExportError):
    """Required destination identifiers are missing or invalid."""


class StoreUnavailable(ExportError):
    """The structured store could not be reached."""


class StoreError(ExportError):
    """The structured store returned an error or a malformed page."""


class StorageWriteError(ExportError):
    """The artifact could not be written to, or referenced in, the blob store."""


class NotificationError(ExportError):
    """The completion notification could not be published."""


class ExportFailed(ExportError):
    """Raised by the activation layer to force redelivery of a failed run."""

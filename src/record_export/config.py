"""Export configuration (environment-backed)."""
from __future__ import annotations

import os
from dataclasses import dataclass, replace
from typing import Mapping, Optional

from record_export.errors import ConfigurationError

URL_POLICIES = ("permanent", "signed")
DEFAULT_URL_TTL_SECONDS = 300


@dataclass
class ExportConfig:
    table_name: str = "TodoItems-dev"
    bucket_name: str = ""
    topic_arn: str = ""
    webhook_url: str = ""
    key_prefix: str = "todo-export"
    url_policy: str = "signed"
    url_ttl_seconds: int = DEFAULT_URL_TTL_SECONDS
    page_size: Optional[int] = None
    subject: str = "Todo Export Complete"
    raise_on_failure: bool = False
    region: Optional[str] = None

    def validate(self) -> "ExportConfig":
        """Raise ConfigurationError unless every destination is usable."""
        if not self.table_name:
            raise ConfigurationError("DYNAMODB_TABLE_NAME is required")
        if not self.bucket_name:
            raise ConfigurationError("S3_BUCKET_NAME environment variable is required")
        if not (self.topic_arn or self.webhook_url):
            raise ConfigurationError(
                "SNS_TOPIC_ARN or NOTIFY_WEBHOOK_URL environment variable is required"
            )
        if not self.key_prefix:
            raise ConfigurationError("EXPORT_KEY_PREFIX must not be empty")
        if self.url_policy not in URL_POLICIES:
            raise ConfigurationError(
                f"EXPORT_URL_POLICY must be one of {', '.join(URL_POLICIES)}, got {self.url_policy!r}"
            )
        if self.url_ttl_seconds <= 0:
            raise ConfigurationError("EXPORT_URL_TTL_SECONDS must be positive")
        if self.page_size is not None and self.page_size <= 0:
            raise ConfigurationError("EXPORT_PAGE_SIZE must be positive")
        return self

    def with_overrides(self, **overrides) -> "ExportConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})


def load_config(environ: Optional[Mapping[str, str]] = None) -> ExportConfig:
    env = os.environ if environ is None else environ
    return ExportConfig(
        table_name=env.get("DYNAMODB_TABLE_NAME", "TodoItems-dev"),
        bucket_name=env.get("S3_BUCKET_NAME", ""),
        topic_arn=env.get("SNS_TOPIC_ARN", ""),
        webhook_url=env.get("NOTIFY_WEBHOOK_URL", ""),
        key_prefix=env.get("EXPORT_KEY_PREFIX", "todo-export"),
        url_policy=env.get("EXPORT_URL_POLICY", "signed").strip().lower(),
        url_ttl_seconds=_int(env, "EXPORT_URL_TTL_SECONDS", DEFAULT_URL_TTL_SECONDS),
        page_size=_int(env, "EXPORT_PAGE_SIZE", None),
        subject=env.get("EXPORT_SUBJECT", "Todo Export Complete"),
        raise_on_failure=env.get("EXPORT_RAISE_ON_FAILURE", "").strip().lower()
        in ("1", "true", "yes"),
        region=env.get("AWS_REGION") or None,
    )


def _int(env: Mapping[str, str], name: str, default: Optional[int]) -> Optional[int]:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc

"""Activation entry point: one export per trigger message."""

import logging
from typing import Any, Dict, List, Optional

import boto3

from record_export.config import ExportConfig, load_config
from record_export.coordinator import ExportCoordinator
from record_export.errors import ExportFailed
from record_export.reference import build_reference_policy
from record_export.stores.aws import DynamoDBStore, S3BlobStore, SNSChannel
from record_export.stores.base import NotificationChannel
from record_export.stores.webhook import WebhookChannel

logger = logging.getLogger(__name__)


def build_coordinator(config: ExportConfig, session: Optional[boto3.Session] = None) -> ExportCoordinator:
    """Wire AWS-backed collaborators from a validated config."""
    config.validate()
    session = session or boto3.Session(region_name=config.region)

    notifier: NotificationChannel
    if config.topic_arn:
        notifier = SNSChannel(session.client("sns"), config.topic_arn)
    else:
        notifier = WebhookChannel(config.webhook_url)

    return ExportCoordinator(
        store=DynamoDBStore(session.client("dynamodb"), config.table_name),
        blob_store=S3BlobStore(session.client("s3"), config.bucket_name),
        notifier=notifier,
        reference_policy=build_reference_policy(config),
        key_prefix=config.key_prefix,
        subject=config.subject,
        page_size=config.page_size,
    )


def handle_event(
    event: Dict[str, Any],
    context: Any = None,
    coordinator: Optional[ExportCoordinator] = None,
    config: Optional[ExportConfig] = None,
) -> List[Dict[str, Any]]:
    """Run one export per message in event["Records"] (or one run for a bare event).

    Misconfiguration raises before any I/O. Exceptions escaping the coordinator are
    re-raised so the trigger redelivers; failure outcomes are raised only when
    raise_on_failure is set.
    """
    config = (config or load_config()).validate()
    coordinator = coordinator or build_coordinator(config)

    messages = (event or {}).get("Records") or [{}]
    logger.info("Processing %d activation message(s)", len(messages))

    outcomes = []
    for message in messages:
        message_id = message.get("messageId", "-")
        logger.info("Processing message: %s", message_id)
        try:
            outcome = coordinator.run_export()
        except Exception:
            logger.error("Error processing message %s", message_id, exc_info=True)
            raise

        if outcome.success:
            logger.info("Export completed successfully: %s", outcome.file_name)
        else:
            logger.error("Export failed: %s", outcome.error_message)
            if config.raise_on_failure:
                raise ExportFailed(outcome.error_message)
        outcomes.append(outcome.to_dict())

    return outcomes

"""boto3-backed collaborators: DynamoDB scan, S3 artifacts, SNS notifications."""

import base64
import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from boto3.dynamodb.types import Binary, TypeDeserializer
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from record_export.errors import (
    NotificationError,
    StorageWriteError,
    StoreError,
    StoreUnavailable,
)
from record_export.models import Record
from record_export.stores.base import BlobStore, NotificationChannel, StructuredStore

logger = logging.getLogger(__name__)

SNS_SUBJECT_LIMIT = 100

_CONNECTION_ERRORS = (EndpointConnectionError, ConnectTimeoutError, ReadTimeoutError)


class DynamoDBStore(StructuredStore):
    def __init__(self, client, table_name: str):
        self._client = client
        self._table = table_name
        self._deserializer = TypeDeserializer()

    def describe(self) -> str:
        return f"DynamoDB table {self._table}"

    def scan_page(
        self, token: Optional[Dict[str, Any]] = None, limit: Optional[int] = None
    ) -> Tuple[List[Record], Optional[Dict[str, Any]]]:
        params: Dict[str, Any] = {"TableName": self._table}
        if token:
            params["ExclusiveStartKey"] = token
        if limit:
            params["Limit"] = limit

        try:
            response = self._client.scan(**params)
        except _CONNECTION_ERRORS as exc:
            raise StoreUnavailable(f"Cannot reach DynamoDB table {self._table}: {exc}") from exc
        except ClientError as exc:
            raise StoreError(f"Scan of {self._table} failed: {exc}") from exc
        except BotoCoreError as exc:
            raise StoreUnavailable(f"Scan of {self._table} failed: {exc}") from exc

        items = response.get("Items", [])
        if not isinstance(items, list):
            raise StoreError(f"Scan of {self._table} returned malformed Items")
        try:
            records = [self._unmarshall(item) for item in items]
        except (TypeError, AttributeError) as exc:
            raise StoreError(f"Scan of {self._table} returned an undecodable item: {exc}") from exc

        return records, response.get("LastEvaluatedKey") or None

    def _unmarshall(self, item: Dict[str, Any]) -> Record:
        return {
            name: _plain(self._deserializer.deserialize(attr))
            for name, attr in item.items()
        }


def _plain(value: Any) -> Any:
    """Replace boto3 Binary wrappers (at any depth) with base64 text."""
    if isinstance(value, Binary):
        return base64.b64encode(value.value).decode("ascii")
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, set):
        return {_plain(v) for v in value}
    return value


class S3BlobStore(BlobStore):
    def __init__(self, client, bucket: str):
        self._client = client
        self._bucket = bucket

    def put(self, key: str, content: bytes, content_type: str) -> str:
        logger.info("Uploading %s to s3://%s", key, self._bucket)
        try:
            self._client.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=content,
                ContentType=content_type,
                ContentDisposition=f'attachment; filename="{key}"',
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageWriteError(f"Upload of {key} to {self._bucket} failed: {exc}") from exc
        return key

    def public_url(self, key: str) -> str:
        return f"https://{self._bucket}.s3.amazonaws.com/{key}"

    def sign_url(self, key: str, ttl_seconds: int) -> str:
        try:
            return self._client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self._bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except (ClientError, BotoCoreError) as exc:
            raise StorageWriteError(f"Signing URL for {key} failed: {exc}") from exc


class SNSChannel(NotificationChannel):
    def __init__(self, client, topic_arn: str):
        self._client = client
        self._topic_arn = topic_arn

    def publish(self, subject: str, text_body: str, structured_body: Dict[str, Any]) -> None:
        logger.info("Sending SNS notification to %s", self._topic_arn)
        try:
            self._client.publish(
                TopicArn=self._topic_arn,
                Subject=subject[:SNS_SUBJECT_LIMIT],
                Message=json.dumps(structured_body, indent=2),
            )
        except (ClientError, BotoCoreError) as exc:
            raise NotificationError(f"Publish to {self._topic_arn} failed: {exc}") from exc

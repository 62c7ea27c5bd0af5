"""Command-line interface for record-export."""

import argparse
import logging
import sys
from typing import List, Optional

from record_export.config import URL_POLICIES, load_config
from record_export.errors import ConfigurationError
from record_export.handler import build_coordinator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="record-export",
        description="Export every record of a DynamoDB table to a CSV file in S3 and announce it.",
    )
    parser.add_argument(
        "--table", type=str, default=None,
        help="Table to scan (env: DYNAMODB_TABLE_NAME)",
    )
    parser.add_argument(
        "--bucket", type=str, default=None,
        help="Destination bucket (env: S3_BUCKET_NAME)",
    )
    parser.add_argument(
        "--topic-arn", type=str, default=None,
        help="SNS topic for the completion notice (env: SNS_TOPIC_ARN)",
    )
    parser.add_argument(
        "--webhook-url", type=str, default=None,
        help="Webhook for the completion notice when no topic is set (env: NOTIFY_WEBHOOK_URL)",
    )
    parser.add_argument(
        "--prefix", type=str, default=None, dest="key_prefix",
        help="Artifact key prefix (env: EXPORT_KEY_PREFIX, default: todo-export)",
    )
    parser.add_argument(
        "--url-policy", choices=list(URL_POLICIES), default=None,
        help="Permanent public URL or time-limited signed URL (default: signed)",
    )
    parser.add_argument(
        "--ttl", type=int, default=None, dest="url_ttl_seconds",
        help="Signed URL lifetime in seconds (default: 300)",
    )
    parser.add_argument(
        "--page-size", type=int, default=None,
        help="Records requested per scan page (default: store decides)",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable verbose/debug logging",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        config = load_config().with_overrides(
            table_name=args.table,
            bucket_name=args.bucket,
            topic_arn=args.topic_arn,
            webhook_url=args.webhook_url,
            key_prefix=args.key_prefix,
            url_policy=args.url_policy,
            url_ttl_seconds=args.url_ttl_seconds,
            page_size=args.page_size,
        )
        coordinator = build_coordinator(config)
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    print(f"Exporting {config.table_name} to s3://{config.bucket_name}...")
    outcome = coordinator.run_export()

    if not outcome.success:
        print(f"Export failed: {outcome.error_message}", file=sys.stderr)
        sys.exit(1)
    if outcome.artifact_key is None:
        print(f"Done. {outcome.error_message}; nothing stored.")
        return
    print(f"Done. Stored {outcome.artifact_key}")
    print(f"Download: {outcome.download_url}")


if __name__ == "__main__":
    main()

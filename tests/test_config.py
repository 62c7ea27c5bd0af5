import pytest

from record_export.config import ExportConfig, load_config
from record_export.errors import ConfigurationError
from record_export.reference import PermanentReference, TimeLimitedReference, build_reference_policy


def test_defaults_from_empty_environment():
    config = load_config({})
    assert config.table_name == "TodoItems-dev"
    assert config.key_prefix == "todo-export"
    assert config.url_policy == "signed"
    assert config.url_ttl_seconds == 300
    assert config.page_size is None
    assert config.raise_on_failure is False


def test_values_from_environment():
    config = load_config({
        "DYNAMODB_TABLE_NAME": "todos",
        "S3_BUCKET_NAME": "exports",
        "SNS_TOPIC_ARN": "arn:aws:sns:us-east-1:123456789012:done",
        "EXPORT_URL_POLICY": "Permanent",
        "EXPORT_URL_TTL_SECONDS": "60",
        "EXPORT_PAGE_SIZE": "25",
        "EXPORT_RAISE_ON_FAILURE": "true",
    })
    assert config.table_name == "todos"
    assert config.url_policy == "permanent"
    assert config.url_ttl_seconds == 60
    assert config.page_size == 25
    assert config.raise_on_failure is True
    assert config.validate() is config


def test_missing_bucket_is_fatal():
    with pytest.raises(ConfigurationError, match="S3_BUCKET_NAME"):
        ExportConfig(topic_arn="arn").validate()


def test_missing_notification_destination_is_fatal():
    with pytest.raises(ConfigurationError, match="SNS_TOPIC_ARN"):
        ExportConfig(bucket_name="b").validate()


def test_webhook_satisfies_notification_destination():
    ExportConfig(bucket_name="b", webhook_url="https://hooks.example.com/x").validate()


def test_bad_policy_and_ttl():
    with pytest.raises(ConfigurationError):
        ExportConfig(bucket_name="b", topic_arn="t", url_policy="forever").validate()
    with pytest.raises(ConfigurationError):
        ExportConfig(bucket_name="b", topic_arn="t", url_ttl_seconds=0).validate()


def test_non_integer_setting():
    with pytest.raises(ConfigurationError, match="EXPORT_PAGE_SIZE"):
        load_config({"EXPORT_PAGE_SIZE": "lots"})


def test_overrides_skip_none():
    config = ExportConfig(bucket_name="b").with_overrides(bucket_name=None, table_name="t")
    assert config.bucket_name == "b"
    assert config.table_name == "t"


def test_reference_policy_selection():
    assert isinstance(build_reference_policy(ExportConfig(url_policy="permanent")), PermanentReference)
    policy = build_reference_policy(ExportConfig(url_policy="signed", url_ttl_seconds=90))
    assert isinstance(policy, TimeLimitedReference)
    assert policy.ttl_seconds == 90
    with pytest.raises(ConfigurationError):
        build_reference_policy(ExportConfig(url_policy="other"))

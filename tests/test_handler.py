import boto3
import pytest

from record_export.config import ExportConfig
from record_export.coordinator import ExportCoordinator
from record_export.errors import ConfigurationError, ExportFailed
from record_export.handler import build_coordinator, handle_event
from record_export.stores.memory import MemoryBlobStore

CONFIG = ExportConfig(bucket_name="exports", topic_arn="arn:aws:sns:us-east-1:123456789012:t")


def test_one_export_per_message(make_coordinator, todo_records, channel):
    event = {"Records": [{"messageId": "m1", "body": "{}"}, {"messageId": "m2", "body": "{}"}]}

    outcomes = handle_event(event, coordinator=make_coordinator(todo_records), config=CONFIG)

    assert [o["success"] for o in outcomes] == [True, True]
    assert len(channel.published) == 2


def test_bare_event_runs_once(make_coordinator):
    outcomes = handle_event({}, coordinator=make_coordinator([]), config=CONFIG)
    assert outcomes == [{"success": True, "fileName": "empty-export", "errorMessage": "No items found"}]


def test_configuration_checked_before_any_io(make_coordinator, todo_records, blob_store):
    with pytest.raises(ConfigurationError):
        handle_event({}, coordinator=make_coordinator(todo_records), config=ExportConfig())
    assert blob_store.objects == {}


def test_failure_outcome_is_returned_by_default(make_coordinator, todo_records):
    coordinator = make_coordinator(todo_records, blob=MemoryBlobStore(fail_writes=True))
    outcomes = handle_event({}, coordinator=coordinator, config=CONFIG)
    assert outcomes[0]["success"] is False


def test_failure_outcome_raised_when_configured(make_coordinator, todo_records):
    coordinator = make_coordinator(todo_records, blob=MemoryBlobStore(fail_writes=True))
    config = ExportConfig(bucket_name="exports", topic_arn="t", raise_on_failure=True)
    with pytest.raises(ExportFailed, match="write rejected"):
        handle_event({}, coordinator=coordinator, config=config)


def test_build_coordinator_wires_aws_collaborators():
    session = boto3.Session(
        region_name="us-east-1", aws_access_key_id="testing", aws_secret_access_key="testing"
    )
    assert isinstance(build_coordinator(CONFIG, session=session), ExportCoordinator)


def test_build_coordinator_rejects_bad_config():
    with pytest.raises(ConfigurationError):
        build_coordinator(ExportConfig(bucket_name="exports"))

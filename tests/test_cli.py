import pytest

from record_export.cli import build_parser, main


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.table is None
    assert args.url_policy is None
    assert args.verbose is False


def test_parser_overrides():
    args = build_parser().parse_args([
        "--table", "todos", "--bucket", "exports", "--url-policy", "permanent",
        "--ttl", "60", "--page-size", "50", "--prefix", "nightly", "-v",
    ])
    assert args.table == "todos"
    assert args.bucket == "exports"
    assert args.url_policy == "permanent"
    assert args.url_ttl_seconds == 60
    assert args.page_size == 50
    assert args.key_prefix == "nightly"
    assert args.verbose is True


def test_parser_rejects_unknown_policy():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--url-policy", "forever"])


def test_main_exits_on_missing_configuration(monkeypatch, capsys):
    for name in ("S3_BUCKET_NAME", "SNS_TOPIC_ARN", "NOTIFY_WEBHOOK_URL"):
        monkeypatch.delenv(name, raising=False)
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert "S3_BUCKET_NAME" in capsys.readouterr().err


def test_main_exits_on_malformed_integer_setting(monkeypatch, capsys):
    monkeypatch.setenv("EXPORT_PAGE_SIZE", "lots")
    with pytest.raises(SystemExit) as excinfo:
        main([])
    assert excinfo.value.code == 2
    assert "EXPORT_PAGE_SIZE must be an integer" in capsys.readouterr().err

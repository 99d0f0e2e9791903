"""Tests for environment configuration and logging setup."""

from __future__ import annotations

import pytest
import structlog
from structlog.testing import capture_logs

from minvcs import ConfigError, MinvcsConfig, MinvcsEngine, initialize_repository
from minvcs.logging_config import configure_logging, get_logger


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("MINVCS_AUTHOR", "MINVCS_COMPRESSION_LEVEL", "MINVCS_LOG_LEVEL", "MINVCS_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


def test_from_env_defaults() -> None:
    config = MinvcsConfig.from_env()

    assert config == MinvcsConfig()
    assert config.author == "anonymous"
    assert config.compression_level == 1
    assert config.log_level == "WARNING"
    assert config.log_format == "console"


def test_from_env_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINVCS_AUTHOR", "carol")
    monkeypatch.setenv("MINVCS_COMPRESSION_LEVEL", "9")
    monkeypatch.setenv("MINVCS_LOG_LEVEL", "debug")
    monkeypatch.setenv("MINVCS_LOG_FORMAT", "JSON")

    config = MinvcsConfig.from_env()

    assert config.author == "carol"
    assert config.compression_level == 9
    assert config.log_level == "DEBUG"
    assert config.log_format == "json"


@pytest.mark.parametrize("value", ["-1", "10", "fast", ""])
def test_invalid_compression_level(monkeypatch: pytest.MonkeyPatch, value: str) -> None:
    monkeypatch.setenv("MINVCS_COMPRESSION_LEVEL", value)

    with pytest.raises(ConfigError) as exc_info:
        MinvcsConfig.from_env()

    assert exc_info.value.name == "MINVCS_COMPRESSION_LEVEL"


def test_invalid_log_format(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINVCS_LOG_FORMAT", "xml")

    with pytest.raises(ConfigError):
        MinvcsConfig.from_env()


def test_multiline_author_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINVCS_AUTHOR", "a\nb")

    with pytest.raises(ConfigError):
        MinvcsConfig.from_env()


def test_configure_logging_rejects_unknown_level() -> None:
    with pytest.raises(ConfigError):
        configure_logging("LOUD")


def test_configure_logging_rejects_unknown_format() -> None:
    with pytest.raises(ConfigError):
        configure_logging("INFO", "xml")


def test_json_logging_writes_events_to_stderr(tmp_path, capsys) -> None:
    configure_logging("INFO", "json")
    engine = MinvcsEngine(initialize_repository(tmp_path / "repo"))
    engine.snapshot()

    err = capsys.readouterr().err
    assert '"event": "snapshot_created"' in err
    assert '"level": "info"' in err


def test_warning_level_filters_info(tmp_path, capsys) -> None:
    configure_logging("WARNING")
    engine = MinvcsEngine(initialize_repository(tmp_path / "repo"))
    engine.snapshot()

    assert "snapshot_created" not in capsys.readouterr().err


def test_snapshot_emits_structured_events(engine) -> None:
    with capture_logs() as logs:
        digest = engine.snapshot(comment="logged")

    events = [entry["event"] for entry in logs]
    assert "head_updated" in events
    created = next(entry for entry in logs if entry["event"] == "snapshot_created")
    assert created["digest"] == digest
    assert created["log_level"] == "info"


def test_undecodable_author_rejected(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINVCS_AUTHOR", "caf\udce9")

    with pytest.raises(ConfigError) as exc_info:
        MinvcsConfig.from_env()

    assert exc_info.value.name == "MINVCS_AUTHOR"


def test_get_logger_installs_quiet_default(tmp_path, capsys) -> None:
    """Library use without configure_logging prints no debug or info events."""
    assert not structlog.is_configured()

    get_logger("minvcs.tests")
    engine = MinvcsEngine(initialize_repository(tmp_path / "repo"))
    (engine.root / "a.txt").write_bytes(b"hello")
    engine.snapshot()

    captured = capsys.readouterr()
    assert structlog.is_configured()
    assert captured.out == ""
    assert "file_stored" not in captured.err
    assert "snapshot_created" not in captured.err


def test_get_logger_keeps_existing_configuration(tmp_path, capsys) -> None:
    configure_logging("INFO", "json")

    get_logger("minvcs.tests")
    MinvcsEngine(initialize_repository(tmp_path / "repo")).snapshot()

    assert '"event": "snapshot_created"' in capsys.readouterr().err

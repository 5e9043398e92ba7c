from __future__ import annotations

import dataclasses
from datetime import datetime
from pathlib import Path

import pytest

from update_watch.core.config import MarkerSet, MonitorConfig, load_config, validate_config
from update_watch.core.errors import Err, EventKind, Ok


def _env(tmp_path: Path, **extra: str) -> dict:
    env = {
        "UPDATE_WATCH_SERVER_NAME": "APP-01",
        "UPDATE_WATCH_LOGS_DIR": str(tmp_path / "logs"),
        "UPDATE_WATCH_STATE_DIR": str(tmp_path / "state"),
    }
    env.update(extra)
    return env


def test_load_config_applies_defaults(tmp_path: Path) -> None:
    config = load_config(env=_env(tmp_path))

    assert config.server_name == "APP-01"
    assert config.logs_dir == tmp_path / "logs"
    assert config.primary_log_path == tmp_path / "logs" / "ezvit.log"
    assert config.encoding == "utf-8"
    assert config.audit_path == tmp_path / "state" / "audit.jsonl"
    assert config.slack_timeout_s == 15
    assert isinstance(validate_config(config), Ok)


def test_load_config_reads_overrides(tmp_path: Path) -> None:
    config = load_config(
        env=_env(
            tmp_path,
            UPDATE_WATCH_PRIMARY_LOG="events.log",
            UPDATE_WATCH_ENCODING="CP1251",
            UPDATE_WATCH_AUDIT_LOG=str(tmp_path / "audit.jsonl"),
            SLACK_DEFAULT_CHANNEL="ops",
            SLACK_TIMEOUT_S="30",
        )
    )
    assert config.primary_log_name == "events.log"
    assert config.encoding == "cp1251"
    assert config.audit_path == tmp_path / "audit.jsonl"
    assert config.slack_channel == "ops"
    assert config.slack_timeout_s == 30


@pytest.mark.parametrize("missing", ["UPDATE_WATCH_SERVER_NAME", "UPDATE_WATCH_LOGS_DIR"])
def test_missing_required_key(tmp_path: Path, missing: str) -> None:
    env = _env(tmp_path)
    del env[missing]

    res = validate_config(load_config(env=env))

    assert isinstance(res, Err)
    assert res.kind is EventKind.CONFIG_MISSING_KEY
    assert missing in res.message


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("UPDATE_WATCH_ENCODING", "utf-16"),
        ("UPDATE_WATCH_PRIMARY_LOG", "../ezvit.log"),
        ("SLACK_TIMEOUT_S", "soon"),
        ("SLACK_TIMEOUT_S", "0"),
        ("SLACK_BASE", "chat.local"),
    ],
)
def test_invalid_values(tmp_path: Path, key: str, value: str) -> None:
    res = validate_config(load_config(env=_env(tmp_path, **{key: value})))

    assert isinstance(res, Err)
    assert res.kind is EventKind.CONFIG_INVALID_VALUE


def test_allowed_encodings_live_on_the_config(tmp_path: Path) -> None:
    config = dataclasses.replace(
        load_config(env=_env(tmp_path, UPDATE_WATCH_ENCODING="utf-16")),
        allowed_encodings=("utf-16",),
    )
    assert isinstance(validate_config(config), Ok)


def test_empty_marker_is_invalid(tmp_path: Path) -> None:
    config = MonitorConfig(server_name="APP-01", logs_dir=tmp_path, markers=MarkerSet(end_marker=""))
    res = validate_config(config)
    assert isinstance(res, Err)
    assert res.kind is EventKind.CONFIG_INVALID_VALUE


def test_update_log_path_is_dated_by_trigger(tmp_path: Path) -> None:
    config = MonitorConfig(server_name="APP-01", logs_dir=tmp_path)
    assert config.update_log_path(datetime(2025, 10, 3, 5, 0)) == tmp_path / "update_2025-10-03.log"


def test_dotenv_is_found_from_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so teardown also drops whatever load_dotenv wrote
    for key in ("UPDATE_WATCH_SERVER_NAME", "UPDATE_WATCH_LOGS_DIR", "UPDATE_WATCH_TRIGGER_PHRASE"):
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    (tmp_path / ".env").write_text(
        "UPDATE_WATCH_SERVER_NAME=CWD-01\n"
        f"UPDATE_WATCH_LOGS_DIR={tmp_path / 'logs'}\n"
        "UPDATE_WATCH_TRIGGER_PHRASE=Завантаження\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(tmp_path)

    config = load_config()

    assert config.server_name == "CWD-01"
    assert config.logs_dir == tmp_path / "logs"
    assert config.markers.trigger_phrase == "Завантаження"


def test_trigger_settings_are_read_from_env(tmp_path: Path) -> None:
    config = load_config(env=_env(tmp_path, UPDATE_WATCH_PACKAGE_NAME="medoc"))
    assert config.markers.package_name == "medoc"
    assert config.markers.trigger_phrase == ""
    assert isinstance(validate_config(config), Ok)

"""
Runtime configuration for the update watcher.

Settings come from the process environment, optionally seeded from a `.env`
file via `python-dotenv` (the given path, or the first `.env` found walking up
from the working directory). Unlike a module full of globals, everything ends up
on one frozen `MonitorConfig` that is passed explicitly to each step.

Environment variables:
- `UPDATE_WATCH_SERVER_NAME` (required): identifies this server in messages
  and in the checkpoint file name.
- `UPDATE_WATCH_LOGS_DIR` (required): directory holding the primary log and
  the per-day `update_YYYY-MM-DD.log` files.
- `UPDATE_WATCH_PRIMARY_LOG` (default `ezvit.log`): primary log file name.
- `UPDATE_WATCH_STATE_DIR` (default `~/.update_watch`): checkpoint directory.
- `UPDATE_WATCH_ENCODING` (default `utf-8`): encoding of both log files.
- `UPDATE_WATCH_AUDIT_LOG` (default `<state dir>/audit.jsonl`).
- `UPDATE_WATCH_PACKAGE_NAME` (default `ezvit`): prefix of the `.upd` file name
  that marks an update in the primary log.
- `UPDATE_WATCH_TRIGGER_PHRASE` (default empty): extra wording a trigger line
  must contain, in whatever language the update process logs.
- `SLACK_BASE`, `SLACK_DEFAULT_CHANNEL`, `SLACK_BEARER`, `SLACK_TIMEOUT_S`:
  chat notification endpoint.
"""

from __future__ import annotations

import codecs
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import find_dotenv, load_dotenv

from .errors import Err, EventKind, Ok, Result

DEFAULT_ALLOWED_ENCODINGS: Tuple[str, ...] = (
    "utf-8",
    "utf-8-sig",
    "cp1251",
    "cp866",
    "koi8-r",
    "latin-1",
)


@dataclass(frozen=True)
class MarkerSet:
    """Literal phrases the update process writes into its logs."""

    start_marker: str = "Update operation started"
    end_marker: str = "Update operation finished"
    completion_marker: str = "Update completed successfully"
    version_phrase: str = "program version"
    # Update file names look like `<package_name>.<from>-<to>.upd`
    package_name: str = "ezvit"
    # Optional wording the trigger line must also contain (empty = file name alone)
    trigger_phrase: str = ""


@dataclass(frozen=True)
class MonitorConfig:
    server_name: str
    logs_dir: Optional[Path]
    primary_log_name: str = "ezvit.log"
    state_dir: Path = field(default_factory=lambda: Path.home() / ".update_watch")
    encoding: str = "utf-8"
    allowed_encodings: Tuple[str, ...] = DEFAULT_ALLOWED_ENCODINGS
    audit_log_path: Optional[Path] = None
    slack_base: str = "http://localhost:4003"
    slack_channel: str = "update-reports"
    slack_bearer: str = "demo-token"
    slack_timeout_s: int = 15
    markers: MarkerSet = field(default_factory=MarkerSet)

    @property
    def primary_log_path(self) -> Path:
        return Path(self.logs_dir or ".") / self.primary_log_name

    @property
    def audit_path(self) -> Path:
        return self.audit_log_path or (self.state_dir / "audit.jsonl")

    def update_log_path(self, day) -> Path:
        """Per-day update log for the date of a trigger."""
        return Path(self.logs_dir or ".") / f"update_{day:%Y-%m-%d}.log"


def _get(env: Mapping[str, str], key: str) -> str:
    return (env.get(key) or "").strip()


def load_config(env: Optional[Mapping[str, str]] = None, dotenv_path: Optional[str] = None) -> MonitorConfig:
    """Build a `MonitorConfig` from `env` (default: `.env` + `os.environ`).

    Missing or malformed values are kept as-is so that `validate_config` can
    report them; this function does not raise for bad settings.
    """
    if env is None:
        load_dotenv(dotenv_path or find_dotenv(usecwd=True), override=True)
        env = os.environ

    logs_dir = _get(env, "UPDATE_WATCH_LOGS_DIR")
    state_dir = _get(env, "UPDATE_WATCH_STATE_DIR")
    audit_log = _get(env, "UPDATE_WATCH_AUDIT_LOG")
    timeout_raw = _get(env, "SLACK_TIMEOUT_S") or "15"
    try:
        timeout = int(timeout_raw)
    except ValueError:
        timeout = -1

    return MonitorConfig(
        server_name=_get(env, "UPDATE_WATCH_SERVER_NAME"),
        logs_dir=Path(logs_dir).expanduser() if logs_dir else None,
        primary_log_name=_get(env, "UPDATE_WATCH_PRIMARY_LOG") or "ezvit.log",
        state_dir=Path(state_dir).expanduser() if state_dir else Path.home() / ".update_watch",
        encoding=(_get(env, "UPDATE_WATCH_ENCODING") or "utf-8").lower(),
        audit_log_path=Path(audit_log).expanduser() if audit_log else None,
        slack_base=_get(env, "SLACK_BASE") or "http://localhost:4003",
        slack_channel=_get(env, "SLACK_DEFAULT_CHANNEL") or "update-reports",
        slack_bearer=_get(env, "SLACK_BEARER") or "demo-token",
        slack_timeout_s=timeout,
        markers=MarkerSet(
            package_name=_get(env, "UPDATE_WATCH_PACKAGE_NAME") or "ezvit",
            trigger_phrase=_get(env, "UPDATE_WATCH_TRIGGER_PHRASE"),
        ),
    )


def validate_config(config: MonitorConfig) -> Result[MonitorConfig]:
    if not config.server_name:
        return Err(EventKind.CONFIG_MISSING_KEY, "UPDATE_WATCH_SERVER_NAME is not set.")
    if config.logs_dir is None:
        return Err(EventKind.CONFIG_MISSING_KEY, "UPDATE_WATCH_LOGS_DIR is not set.")

    encoding = config.encoding.lower()
    allowed = {e.lower() for e in config.allowed_encodings}
    if encoding not in allowed:
        return Err(
            EventKind.CONFIG_INVALID_VALUE,
            f"UPDATE_WATCH_ENCODING={config.encoding!r} is not one of {sorted(allowed)}.",
        )
    try:
        codecs.lookup(encoding)
    except LookupError:
        return Err(EventKind.CONFIG_INVALID_VALUE, f"Unknown encoding {config.encoding!r}.")

    if not config.primary_log_name or Path(config.primary_log_name).name != config.primary_log_name:
        return Err(
            EventKind.CONFIG_INVALID_VALUE,
            f"UPDATE_WATCH_PRIMARY_LOG must be a plain file name, got {config.primary_log_name!r}.",
        )
    if config.slack_timeout_s <= 0:
        return Err(EventKind.CONFIG_INVALID_VALUE, "SLACK_TIMEOUT_S must be a positive integer.")
    if not config.slack_base.startswith(("http://", "https://")):
        return Err(EventKind.CONFIG_INVALID_VALUE, f"SLACK_BASE must be an http(s) URL, got {config.slack_base!r}.")

    markers = config.markers
    if not (markers.start_marker and markers.end_marker and markers.completion_marker and markers.version_phrase
            and markers.package_name):
        return Err(EventKind.CONFIG_INVALID_VALUE, "Log markers must be non-empty strings.")
    return Ok(config)

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Any, List, Tuple

import pytest

from update_watch.core.config import MonitorConfig
from update_watch.core.errors import Err, EventKind, Ok, Result
from update_watch.integrations.audit import Severity

PRIMARY_LOG = "\n".join(
    [
        "23.10.2025 4:59:58 Checking for updates on update server",
        "23.10.2025 5:00:00 Started download of update package ezvit.11.02.185-11.02.186.upd",
        "23.10.2025 5:00:07 Download finished, 48211 KB",
        "",
    ]
)

UPDATE_LOG_OK = "\n".join(
    [
        "23.10.25 10:00:00.123 4512 INFO Update operation started",
        "23.10.25 10:02:11.400 4512 INFO Stopping services",
        "23.10.25 10:30:05.010 4512 INFO Current program version - 186",
        "23.10.25 10:45:20.500 4512 INFO Update completed successfully",
        "23.10.25 10:45:23.999 4512 INFO Update operation finished",
        "",
    ]
)

UPDATE_LOG_NO_VERSION = "\n".join(
    [
        "23.10.25 10:00:00.123 4512 INFO Update operation started",
        "23.10.25 10:30:05.010 4512 INFO Current program version - 185",
        "23.10.25 10:45:20.500 4512 INFO Update completed successfully",
        "23.10.25 10:45:23.999 4512 INFO Update operation finished",
        "",
    ]
)

RUN_TIME = datetime(2025, 10, 23, 12, 0, 0)


class FakeNotifier:
    def __init__(self, result: Result[Any] | None = None) -> None:
        self.sent: List[str] = []
        self._result = result if result is not None else Ok({"ok": True})

    def send(self, text: str) -> Result[Any]:
        self.sent.append(text)
        return self._result


class FailingNotifier(FakeNotifier):
    def __init__(self, message: str = "connection refused") -> None:
        super().__init__(Err(EventKind.NOTIFICATION_TRANSPORT_ERROR, message))


class FakeSink:
    def __init__(self, fail: bool = False) -> None:
        self.records: List[Tuple[str, Severity, EventKind]] = []
        self._fail = fail

    def write(self, text: str, severity: Severity, event: EventKind) -> None:
        if self._fail:
            raise OSError("audit log is read-only")
        self.records.append((text, severity, event))


@pytest.fixture
def logs_dir(tmp_path: Path) -> Path:
    path = tmp_path / "logs"
    path.mkdir()
    return path


@pytest.fixture
def config(tmp_path: Path, logs_dir: Path) -> MonitorConfig:
    return MonitorConfig(
        server_name="APP-01",
        logs_dir=logs_dir,
        state_dir=tmp_path / "state",
    )


def write_logs(logs_dir: Path, primary: str | None = PRIMARY_LOG, update: str | None = UPDATE_LOG_OK) -> None:
    if primary is not None:
        (logs_dir / "ezvit.log").write_text(primary, encoding="utf-8")
    if update is not None:
        (logs_dir / "update_2025-10-23.log").write_text(update, encoding="utf-8")

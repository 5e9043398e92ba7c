"""Structured JSONL audit sink.

Each run leaves one record per reported event. Event kinds are translated
to the integer ids external tooling filters on here and nowhere else: ids
are grouped in blocks of 100 per category.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from update_watch.core.errors import Category, EventKind

CATEGORY_BASE: Dict[Category, int] = {
    Category.OUTCOME: 1000,
    Category.CONFIG: 1100,
    Category.ENVIRONMENT: 1200,
    Category.VALIDATION: 1300,
    Category.TRANSPORT: 1400,
    Category.PERSISTENCE: 1500,
    Category.GENERAL: 1900,
}

_OFFSETS: Dict[EventKind, int] = {
    EventKind.UPDATE_SUCCESS: 0,
    EventKind.NO_UPDATE: 1,
    EventKind.CONFIG_MISSING_KEY: 1,
    EventKind.CONFIG_INVALID_VALUE: 2,
    EventKind.PRIMARY_LOG_MISSING: 1,
    EventKind.SECONDARY_LOG_MISSING: 2,
    EventKind.LOGS_DIRECTORY_MISSING: 3,
    EventKind.CHECKPOINT_DIRECTORY_FAILED: 4,
    EventKind.ENCODING_ERROR: 5,
    EventKind.UPDATE_VALIDATION_FAILED: 1,
    EventKind.NOTIFICATION_TRANSPORT_ERROR: 1,
    EventKind.CHECKPOINT_WRITE_ERROR: 1,
    EventKind.UNEXPECTED: 99,
}


def event_id(kind: EventKind) -> int:
    return CATEGORY_BASE[kind.category] + _OFFSETS[kind]


class Severity(Enum):
    INFORMATION = "Information"
    WARNING = "Warning"
    ERROR = "Error"


@dataclass(frozen=True)
class AuditRecord:
    timestamp: str
    severity: str
    event_id: int
    event: str
    message: str


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp."""
    return datetime.now(tz=timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class JsonlAuditSink:
    """Append-only JSONL audit sink and bounded reader."""

    def __init__(self, path: Path) -> None:
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def write(self, text: str, severity: Severity, event: EventKind) -> None:
        """Append one record. Raises OSError if the file cannot be written."""
        record = AuditRecord(
            timestamp=utc_timestamp(),
            severity=severity.value,
            event_id=event_id(event),
            event=event.slug,
            message=text,
        )
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(record), sort_keys=True, ensure_ascii=False))
            handle.write("\n")

    def read(self, since: Optional[str] = None, limit: int = 50) -> List[dict]:
        """Read recent records, optionally filtered by timestamp lower bound."""
        if limit < 1 or not self._path.exists():
            return []
        entries: List[dict] = []
        with self._path.open("r", encoding="utf-8") as handle:
            for line in handle:
                stripped = line.strip()
                if not stripped:
                    continue
                try:
                    record = json.loads(stripped)
                except json.JSONDecodeError:
                    continue
                if since is not None:
                    ts = record.get("timestamp")
                    if not isinstance(ts, str) or ts < since:
                        continue
                entries.append(record)
        return entries[-limit:]

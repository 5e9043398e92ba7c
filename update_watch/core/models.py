"""
Data model for one update check run.

Everything here is immutable: values are built once by the pipeline and
handed back to the caller in a `RunReport`.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import EventKind


@dataclass(frozen=True)
class TriggerEvent:
    """A primary log line announcing an update package download."""

    timestamp: datetime
    from_version: str
    to_version: str
    # last dotted component of to_version, e.g. "186" for "11.02.186"
    target_token: str


class LocateStatus(Enum):
    FOUND = "found"
    NO_END_MARKER = "no_end_marker"
    NO_START_MARKER = "no_start_marker"


@dataclass(frozen=True)
class OperationBlock:
    start_offset: int
    end_offset: int
    content: str
    status: LocateStatus
    # offset of the end marker when it was seen without a start marker
    end_marker_offset: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.status is LocateStatus.FOUND

    @classmethod
    def missing(cls, status: LocateStatus, end_marker_offset: Optional[int] = None) -> "OperationBlock":
        return cls(
            start_offset=-1,
            end_offset=-1,
            content="",
            status=status,
            end_marker_offset=end_marker_offset,
        )


@dataclass(frozen=True)
class MarkerResult:
    version_confirmed: bool
    completion_confirmed: bool


class ClassificationStatus(Enum):
    SUCCESS = "Success"
    FAILED = "Failed"


@dataclass(frozen=True)
class ClassificationResult:
    status: ClassificationStatus
    version_confirmed: bool
    completion_confirmed: bool
    operation_found: bool
    reason: str

    @property
    def succeeded(self) -> bool:
        return self.status is ClassificationStatus.SUCCESS


@dataclass(frozen=True)
class Duration:
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def seconds(self) -> Optional[int]:
        if self.start is None or self.end is None:
            return None
        return int((self.end - self.start).total_seconds())


class UpdateStatus(Enum):
    SUCCESS = "Success"
    FAILED = "Failed"
    NO_UPDATE = "NoUpdate"
    ERROR = "Error"


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class UpdateResult:
    """Full per-run record of what was detected."""

    status: UpdateStatus
    error: Optional[EventKind] = None
    from_version: Optional[str] = None
    to_version: Optional[str] = None
    update_time: Optional[datetime] = None
    update_start_time: Optional[datetime] = None
    update_end_time: Optional[datetime] = None
    duration_seconds: Optional[int] = None
    reason: str = ""
    update_log_path: Optional[Path] = None

    def to_payload(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "error": self.error.slug if self.error else None,
            "from_version": self.from_version,
            "to_version": self.to_version,
            "update_time": _iso(self.update_time),
            "update_start_time": _iso(self.update_start_time),
            "update_end_time": _iso(self.update_end_time),
            "duration_seconds": self.duration_seconds,
            "reason": self.reason,
            "update_log_path": str(self.update_log_path) if self.update_log_path else None,
        }


class Outcome(Enum):
    SUCCESS = "Success"
    NO_UPDATE = "NoUpdate"
    UPDATE_FAILED = "UpdateFailed"
    ERROR = "Error"

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self]


# External tooling depends on these values.
EXIT_CODES: Dict[Outcome, int] = {
    Outcome.SUCCESS: 0,
    Outcome.NO_UPDATE: 0,
    Outcome.UPDATE_FAILED: 2,
    Outcome.ERROR: 1,
}


@dataclass(frozen=True)
class RunReport:
    """What `run_update_check` hands back to the caller."""

    outcome: Outcome
    event: EventKind
    notification_sent: bool
    update_result: Optional[UpdateResult]
    message: str
    server_name: str = ""

    @property
    def exit_code(self) -> int:
        return self.outcome.exit_code

    def to_payload(self) -> Dict[str, Any]:
        """Machine-readable form of the run, safe for `json.dumps`."""
        return {
            "server": self.server_name,
            "outcome": self.outcome.value,
            "exit_code": self.exit_code,
            "event": self.event.slug,
            "category": self.event.category.value,
            "notification_sent": self.notification_sent,
            "message": self.message,
            "update": self.update_result.to_payload() if self.update_result else None,
        }

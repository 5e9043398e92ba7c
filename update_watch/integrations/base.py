"""Interfaces of the two outbound collaborators the pipeline talks to."""

from __future__ import annotations

from typing import Any, Protocol

from update_watch.core.errors import EventKind, Result
from .audit import Severity


class Notifier(Protocol):
    def send(self, text: str) -> Result[Any]:
        """Deliver `text`; return `Err` with a description on failure."""


class AuditSink(Protocol):
    def write(self, text: str, severity: Severity, event: EventKind) -> None:
        """Record `text`; may raise OSError, callers treat that as a warning."""

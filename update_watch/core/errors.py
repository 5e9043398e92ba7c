"""
Event taxonomy and result values.

Every public step of the update check returns either `Ok(value)` or
`Err(kind, message)`. The kinds are grouped by category; numeric event ids
only exist at the audit sink boundary (see `update_watch.integrations.audit`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar, Union

T = TypeVar("T")


class Category(Enum):
    OUTCOME = "outcome"
    CONFIG = "config"
    ENVIRONMENT = "environment"
    VALIDATION = "validation"
    TRANSPORT = "transport"
    PERSISTENCE = "persistence"
    GENERAL = "general"


class EventKind(Enum):
    """Closed set of events a run can end with."""

    UPDATE_SUCCESS = ("update_success", Category.OUTCOME)
    NO_UPDATE = ("no_update", Category.OUTCOME)

    CONFIG_MISSING_KEY = ("config_missing_key", Category.CONFIG)
    CONFIG_INVALID_VALUE = ("config_invalid_value", Category.CONFIG)

    PRIMARY_LOG_MISSING = ("primary_log_missing", Category.ENVIRONMENT)
    SECONDARY_LOG_MISSING = ("secondary_log_missing", Category.ENVIRONMENT)
    LOGS_DIRECTORY_MISSING = ("logs_directory_missing", Category.ENVIRONMENT)
    CHECKPOINT_DIRECTORY_FAILED = ("checkpoint_directory_failed", Category.ENVIRONMENT)
    ENCODING_ERROR = ("encoding_error", Category.ENVIRONMENT)

    UPDATE_VALIDATION_FAILED = ("update_validation_failed", Category.VALIDATION)

    NOTIFICATION_TRANSPORT_ERROR = ("notification_transport_error", Category.TRANSPORT)

    CHECKPOINT_WRITE_ERROR = ("checkpoint_write_error", Category.PERSISTENCE)

    UNEXPECTED = ("unexpected", Category.GENERAL)

    def __init__(self, slug: str, category: Category) -> None:
        self.slug = slug
        self.category = category

    @property
    def is_error(self) -> bool:
        return self.category is not Category.OUTCOME


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: EventKind
    message: str

    @property
    def ok(self) -> bool:
        return False

    def __str__(self) -> str:
        return f"[{self.kind.slug}] {self.message}"


Result = Union[Ok[T], Err]

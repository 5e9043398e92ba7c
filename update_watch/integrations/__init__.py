from .audit import JsonlAuditSink, Severity, event_id
from .base import AuditSink, Notifier
from .checkpoint import checkpoint_path, ensure_checkpoint_dir, read_checkpoint, write_checkpoint
from .slack import SlackNotifier, post_message

__all__ = [
    "AuditSink",
    "JsonlAuditSink",
    "Notifier",
    "Severity",
    "SlackNotifier",
    "checkpoint_path",
    "ensure_checkpoint_dir",
    "event_id",
    "post_message",
    "read_checkpoint",
    "write_checkpoint",
]

"""
Update Check (LangGraph)
------------------------
This file defines the node functions for the Update Check pipeline.
Each node reads what it needs from UpdateCheckState and writes back either
its result or an `Err` under `state["error"]`; the graph routes any error
straight to `record_outcome`.
"""

import logging
from typing import Callable, List, Optional

from .state import UpdateCheckState
from update_watch.core.config import MonitorConfig, validate_config
from update_watch.core.errors import Err, EventKind
from update_watch.core.models import LocateStatus, Outcome, UpdateResult, UpdateStatus
from update_watch.core.utils import read_log_text
from update_watch.detection import classify_operation, locate_operation, measure_duration, scan_for_trigger
from update_watch.integrations.audit import Severity
from update_watch.integrations.base import AuditSink, Notifier
from update_watch.integrations.checkpoint import (
    checkpoint_path,
    ensure_checkpoint_dir,
    read_checkpoint as load_checkpoint,
    write_checkpoint,
)

logger = logging.getLogger(__name__)

Node = Callable[[UpdateCheckState], UpdateCheckState]

# Node 1: Validate Config


def validate_config_node(state: UpdateCheckState) -> UpdateCheckState:
    """Reject missing or malformed settings before touching the disk"""
    res = validate_config(state["config"])
    if isinstance(res, Err):
        state["error"] = res
    return state

# Node 2: Resolve Checkpoint Path


def resolve_checkpoint_path(state: UpdateCheckState) -> UpdateCheckState:
    """Work out the per-server checkpoint file and create its directory"""
    config = state["config"]
    res = ensure_checkpoint_dir(checkpoint_path(config.state_dir, config.server_name))
    if isinstance(res, Err):
        state["error"] = res
        return state
    state["checkpoint_path"] = res.value
    return state

# Node 3: Ensure Logs Directory


def ensure_logs_directory(state: UpdateCheckState) -> UpdateCheckState:
    logs_dir = state["config"].logs_dir
    if logs_dir is None or not logs_dir.is_dir():
        state["error"] = Err(EventKind.LOGS_DIRECTORY_MISSING, f"Logs directory not found: {logs_dir}")
    return state

# Node 4: Read Checkpoint


def read_checkpoint(state: UpdateCheckState) -> UpdateCheckState:
    checkpoint = load_checkpoint(state["checkpoint_path"])
    if checkpoint is None:
        logger.info("📭 No checkpoint yet, scanning the whole primary log")
    else:
        logger.info(f"📌 Last check at {checkpoint}")
    state["checkpoint"] = checkpoint
    return state

# Node 5: Scan For Trigger


def scan_trigger(state: UpdateCheckState) -> UpdateCheckState:
    """Find the most recent update started since the checkpoint"""
    config = state["config"]
    res = read_log_text(config.primary_log_path, config.encoding, EventKind.PRIMARY_LOG_MISSING)
    if isinstance(res, Err):
        state["error"] = res
        return state

    lines: List[str] = res.value.splitlines()
    logger.info(f"📄 Read {len(lines)} lines from {config.primary_log_path}")
    trigger = scan_for_trigger(lines, state.get("checkpoint"), config.markers)
    state["trigger"] = trigger
    if trigger is None:
        logger.info("😴 No update started since last check")
        state["update_result"] = UpdateResult(
            status=UpdateStatus.NO_UPDATE,
            reason="no update started since last check",
        )
    else:
        logger.info(
            f"🔎 Update {trigger.from_version} -> {trigger.to_version} started at {trigger.timestamp}")
    return state

# Node 6: Classify Update


def classify_update(state: UpdateCheckState) -> UpdateCheckState:
    """Check the per-day update log for the operation block and its markers"""
    config = state["config"]
    trigger = state["trigger"]
    log_path = config.update_log_path(trigger.timestamp)

    base = dict(
        from_version=trigger.from_version,
        to_version=trigger.to_version,
        update_time=trigger.timestamp,
        update_log_path=log_path,
    )

    res = read_log_text(log_path, config.encoding, EventKind.SECONDARY_LOG_MISSING)
    if isinstance(res, Err) and res.kind is EventKind.SECONDARY_LOG_MISSING:
        logger.warning(f"⚠️ Update log not found: {log_path}")
        state["update_result"] = UpdateResult(
            status=UpdateStatus.FAILED,
            error=EventKind.SECONDARY_LOG_MISSING,
            reason=f"update log not found: {log_path.name}",
            **base,
        )
        return state
    if isinstance(res, Err):
        state["error"] = res
        return state

    text = res.value
    block = locate_operation(text, config.markers)
    if block.status is LocateStatus.NO_START_MARKER:
        logger.warning(
            f"⚠️ {log_path.name}: end marker at offset {block.end_marker_offset} has no start marker")

    classification = classify_operation(block, trigger.target_token, config.markers)
    duration = measure_duration(text.splitlines())

    state["update_result"] = UpdateResult(
        status=UpdateStatus.SUCCESS if classification.succeeded else UpdateStatus.FAILED,
        error=None if classification.succeeded else EventKind.UPDATE_VALIDATION_FAILED,
        update_start_time=duration.start,
        update_end_time=duration.end,
        duration_seconds=duration.seconds,
        reason=classification.reason,
        **base,
    )
    logger.info(f"🧪 Classified as {classification.status.value}: {classification.reason}")
    return state

# Node 7: Persist Checkpoint


def persist_checkpoint(state: UpdateCheckState) -> UpdateCheckState:
    """Store the run time before anything is sent out"""
    res = write_checkpoint(state["checkpoint_path"], state["run_time"])
    if isinstance(res, Err):
        state["error"] = res
    else:
        logger.info(f"💾 Checkpoint saved: {res.value}")
    return state

# Node 8: Notify


def _format_duration(seconds: Optional[int]) -> str:
    if seconds is None:
        return "unknown"
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    if hours:
        return f"{hours}h {minutes:02d}m {secs:02d}s"
    return f"{minutes}m {secs:02d}s"


def build_notification_text(config: MonitorConfig, result: UpdateResult) -> str:
    """Human-readable summary of one detected update."""
    if result.status is UpdateStatus.SUCCESS:
        head = f":white_check_mark: *Update succeeded* on `{config.server_name}`"
    else:
        head = f":rotating_light: *Update failed* on `{config.server_name}`"

    lines = [
        head,
        f"*Version:* {result.from_version} → {result.to_version}",
        f"*Started:* {result.update_time:%d.%m.%Y %H:%M:%S}" if result.update_time else "*Started:* unknown",
        f"*Duration:* {_format_duration(result.duration_seconds)}",
    ]
    if result.status is not UpdateStatus.SUCCESS:
        lines.append(f"   ↳ _Reason:_ {result.reason}")
    return "\n".join(lines)


def make_notify(notifier: Notifier) -> Node:
    def notify(state: UpdateCheckState) -> UpdateCheckState:
        """Send one chat message about the detected update"""
        text = build_notification_text(state["config"], state["update_result"])
        res = notifier.send(text)
        if isinstance(res, Err):
            state["error"] = res
            state["notification_sent"] = False
        else:
            logger.info("📢 Notification posted")
            state["notification_sent"] = True
        return state

    return notify

# Node 9: Record Outcome


def _decide(state: UpdateCheckState):
    """Return (outcome, event, severity, message) for the finished run."""
    error = state.get("error")
    if error is not None:
        return Outcome.ERROR, error.kind, Severity.ERROR, error.message

    config = state["config"]
    result = state["update_result"]
    if state.get("trigger") is None:
        return Outcome.NO_UPDATE, EventKind.NO_UPDATE, Severity.INFORMATION, (
            f"No update on {config.server_name} since last check")

    text = build_notification_text(config, result)
    if result.status is UpdateStatus.SUCCESS:
        return Outcome.SUCCESS, EventKind.UPDATE_SUCCESS, Severity.INFORMATION, text
    return Outcome.UPDATE_FAILED, result.error or EventKind.UPDATE_VALIDATION_FAILED, Severity.WARNING, text


def record_to_sink(sink: AuditSink, text: str, severity: Severity, event: EventKind) -> None:
    try:
        sink.write(text, severity, event)
    except Exception as e:
        logger.warning(f"⚠️ Audit sink write failed: {e}")


def make_record_outcome(sink: AuditSink) -> Node:
    def record_outcome(state: UpdateCheckState) -> UpdateCheckState:
        """Map the run to its public outcome and leave an audit trace"""
        outcome, event, severity, message = _decide(state)
        if severity is Severity.ERROR:
            logger.error(f"❌ {message}")
        elif severity is Severity.WARNING:
            logger.warning(f"⚠️ {message}")
        else:
            logger.info(f"✅ {message}")
        record_to_sink(sink, message, severity, event)

        state["outcome"] = outcome
        state["event"] = event
        state["message"] = message
        state.setdefault("notification_sent", False)
        return state

    return record_outcome

"""
Update Check (LangGraph)
------------------------
This file assembles the pipeline graph using LangGraph and exposes
`run_update_check`, the single entry point callers use.

Flow:
  1. validate_config
  2. resolve_checkpoint_path
  3. ensure_logs_directory
  4. read_checkpoint
  5. scan_trigger
  6. classify_update      (only when a trigger was found)
  7. persist_checkpoint
  8. notify               (only when a trigger was found)
  9. record_outcome

Any node that stores an error in the state sends the run straight to
record_outcome, so nothing after a failed step touches the checkpoint or
the notifier.
"""

import logging
from datetime import datetime
from typing import Callable, Optional

from langgraph.graph import END, StateGraph

from .state import UpdateCheckState
from .nodes import (
    classify_update,
    ensure_logs_directory,
    make_notify,
    make_record_outcome,
    persist_checkpoint,
    read_checkpoint,
    record_to_sink,
    resolve_checkpoint_path,
    scan_trigger,
    validate_config_node,
)
from update_watch.core.config import MonitorConfig
from update_watch.core.errors import EventKind
from update_watch.core.models import Outcome, RunReport
from update_watch.integrations.audit import JsonlAuditSink, Severity
from update_watch.integrations.base import AuditSink, Notifier
from update_watch.integrations.slack import SlackNotifier

logger = logging.getLogger(__name__)

RECORD = "record_outcome"


def _next_or_record(next_node: str):
    def route(state: UpdateCheckState) -> str:
        return RECORD if state.get("error") else next_node

    return route


def _after_scan(state: UpdateCheckState) -> str:
    if state.get("error"):
        return RECORD
    return "classify_update" if state.get("trigger") else "persist_checkpoint"


def _after_persist(state: UpdateCheckState) -> str:
    if state.get("error") or state.get("trigger") is None:
        return RECORD
    return "notify"


def build_graph(notifier: Notifier, sink: AuditSink):
    """Build and return the compiled Update Check pipeline."""

    workflow = StateGraph(UpdateCheckState)

    # Register nodes
    workflow.add_node("validate_config", validate_config_node)
    workflow.add_node("resolve_checkpoint_path", resolve_checkpoint_path)
    workflow.add_node("ensure_logs_directory", ensure_logs_directory)
    workflow.add_node("read_checkpoint", read_checkpoint)
    workflow.add_node("scan_trigger", scan_trigger)
    workflow.add_node("classify_update", classify_update)
    workflow.add_node("persist_checkpoint", persist_checkpoint)
    workflow.add_node("notify", make_notify(notifier))
    workflow.add_node(RECORD, make_record_outcome(sink))

    # Define edges (execution order, short-circuit on error)
    workflow.set_entry_point("validate_config")
    workflow.add_conditional_edges(
        "validate_config",
        _next_or_record("resolve_checkpoint_path"),
        {"resolve_checkpoint_path": "resolve_checkpoint_path", RECORD: RECORD},
    )
    workflow.add_conditional_edges(
        "resolve_checkpoint_path",
        _next_or_record("ensure_logs_directory"),
        {"ensure_logs_directory": "ensure_logs_directory", RECORD: RECORD},
    )
    workflow.add_conditional_edges(
        "ensure_logs_directory",
        _next_or_record("read_checkpoint"),
        {"read_checkpoint": "read_checkpoint", RECORD: RECORD},
    )
    workflow.add_edge("read_checkpoint", "scan_trigger")
    workflow.add_conditional_edges(
        "scan_trigger",
        _after_scan,
        {"classify_update": "classify_update", "persist_checkpoint": "persist_checkpoint", RECORD: RECORD},
    )
    workflow.add_conditional_edges(
        "classify_update",
        _next_or_record("persist_checkpoint"),
        {"persist_checkpoint": "persist_checkpoint", RECORD: RECORD},
    )
    workflow.add_conditional_edges(
        "persist_checkpoint",
        _after_persist,
        {"notify": "notify", RECORD: RECORD},
    )
    workflow.add_edge("notify", RECORD)
    workflow.add_edge(RECORD, END)

    app = workflow.compile()
    logger.debug("Update Check pipeline built")
    return app


def run_update_check(
    config: MonitorConfig,
    notifier: Optional[Notifier] = None,
    sink: Optional[AuditSink] = None,
    clock: Optional[Callable[[], datetime]] = None,
) -> RunReport:
    """Run one update check and report its outcome.

    Never raises: an unexpected fault anywhere in the pipeline comes back as
    an `Error` outcome with the `UNEXPECTED` event.

    Args:
        config: Settings; validated as the first pipeline step.
        notifier: Chat notifier (default: Slack via `config`).
        sink: Audit sink (default: JSONL file at `config.audit_path`).
        clock: Source of the run time stored as the new checkpoint.
    """
    notifier = notifier or SlackNotifier(config)
    sink = sink or JsonlAuditSink(config.audit_path)
    clock = clock or datetime.now

    try:
        app = build_graph(notifier, sink)
        final_state = app.invoke({"config": config, "run_time": clock().replace(microsecond=0)})
    except Exception as e:
        message = f"Unexpected error during update check: {type(e).__name__}: {e}"
        logger.exception(f"❌ {message}")
        record_to_sink(sink, message, Severity.ERROR, EventKind.UNEXPECTED)
        return RunReport(
            outcome=Outcome.ERROR,
            event=EventKind.UNEXPECTED,
            notification_sent=False,
            update_result=None,
            message=message,
            server_name=config.server_name,
        )

    return RunReport(
        outcome=final_state["outcome"],
        event=final_state["event"],
        notification_sent=final_state.get("notification_sent", False),
        update_result=final_state.get("update_result"),
        message=final_state["message"],
        server_name=config.server_name,
    )

"""
Update Check (LangGraph)
------------------------
This file defines the State class for the Update Check pipeline.
The State carries everything one run learns as it moves through the nodes.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional, TypedDict

from update_watch.core.config import MonitorConfig
from update_watch.core.errors import Err, EventKind
from update_watch.core.models import Outcome, TriggerEvent, UpdateResult


class UpdateCheckState(TypedDict, total=False):
    """
    State for the Update Check pipeline.
    Fields here are carried across all nodes in the graph.
    """

    # Input: validated settings
    config: MonitorConfig

    # Input: time of this run, stored as the new checkpoint
    run_time: datetime

    # Checkpoint file and the value read from it (None = scan everything)
    checkpoint_path: Path
    checkpoint: Optional[datetime]

    # Most recent qualifying trigger (None = no update since checkpoint)
    trigger: Optional[TriggerEvent]

    # Output: per-run verdict
    update_result: UpdateResult

    # Output: whether the chat notification went out
    notification_sent: bool

    # First error met; routes the run straight to record_outcome
    error: Err

    # Output: public result of the run
    outcome: Outcome
    event: EventKind
    message: str

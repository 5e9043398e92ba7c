from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from update_watch.core.errors import Err, EventKind, Ok, Result
from update_watch.core.timestamps import format_checkpoint, parse_checkpoint
from update_watch.core.utils import sanitize_server_name

logger = logging.getLogger(__name__)


def checkpoint_path(state_dir: Path, server_name: str) -> Path:
    return state_dir / f"last_check_{sanitize_server_name(server_name)}.txt"


def ensure_checkpoint_dir(path: Path) -> Result[Path]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(
            EventKind.CHECKPOINT_DIRECTORY_FAILED,
            f"Cannot create checkpoint directory {path.parent}: {e}",
        )
    return Ok(path)


def read_checkpoint(path: Path) -> Optional[datetime]:
    """Return the stored checkpoint, or None if there is no usable one.

    A missing, unreadable or garbled file means a full re-scan, never a
    skipped update.
    """
    if not path.exists():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning(f"⚠️ Ignoring unreadable checkpoint {path}: {e}")
        return None
    ts = parse_checkpoint(text)
    if ts is None:
        logger.warning(f"⚠️ Ignoring unparsable checkpoint {path}: {text.strip()!r}")
    return ts


def write_checkpoint(path: Path, ts: datetime) -> Result[datetime]:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(format_checkpoint(ts) + "\n", encoding="utf-8")
    except OSError as e:
        return Err(EventKind.CHECKPOINT_WRITE_ERROR, f"Cannot write checkpoint {path}: {e}")
    return Ok(ts.replace(microsecond=0))

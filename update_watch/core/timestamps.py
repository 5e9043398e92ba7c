"""
Timestamp parsers for the two log formats and the checkpoint file.

- primary log:   `DD.MM.YYYY H:MM:SS <text>`
- update log:    `DD.MM.YY H:MM:SS[.mmm] <id> <LEVEL> <text>`
- checkpoint:    `DD.MM.YYYY HH:MM:SS`

All parsers return `None` on anything they cannot read; callers skip such
lines instead of aborting.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Optional

PRIMARY_TS_PATTERN = re.compile(r"^\s*(\d{2}\.\d{2}\.\d{4})\s+(\d{1,2}:\d{2}:\d{2})(?!\d)")
DETAIL_TS_PATTERN = re.compile(
    r"^\s*(\d{2}\.\d{2}\.\d{2})\s+(\d{1,2}:\d{2}:\d{2})(?:[.,]\d{1,3})?(?!\d)"
)

CHECKPOINT_FORMAT = "%d.%m.%Y %H:%M:%S"


def parse_primary_timestamp(line: str) -> Optional[datetime]:
    """Parse the leading 4-digit-year timestamp of a primary log line."""
    m = PRIMARY_TS_PATTERN.match(line)
    if not m:
        return None
    try:
        return datetime.strptime(f"{m.group(1)} {m.group(2)}", "%d.%m.%Y %H:%M:%S")
    except ValueError:
        return None


def parse_detail_timestamp(line: str) -> Optional[datetime]:
    """Parse the leading 2-digit-year timestamp of an update log line.

    Milliseconds, when present, are dropped.
    """
    m = DETAIL_TS_PATTERN.match(line)
    if not m:
        return None
    try:
        return datetime.strptime(f"{m.group(1)} {m.group(2)}", "%d.%m.%y %H:%M:%S")
    except ValueError:
        return None


def format_checkpoint(ts: datetime) -> str:
    return ts.strftime(CHECKPOINT_FORMAT)


def parse_checkpoint(text: str) -> Optional[datetime]:
    try:
        return datetime.strptime(text.strip(), CHECKPOINT_FORMAT)
    except ValueError:
        return None

from __future__ import annotations

import re
from datetime import datetime
from functools import lru_cache
from typing import Optional, Pattern, Sequence

from update_watch.core.config import MarkerSet
from update_watch.core.models import TriggerEvent
from update_watch.core.timestamps import parse_primary_timestamp

DEFAULT_MARKERS = MarkerSet()


@lru_cache(maxsize=16)
def trigger_pattern(package_name: str) -> Pattern[str]:
    """Regex for an update file name such as `ezvit.11.02.185-11.02.186.upd`."""
    return re.compile(
        rf"\b{re.escape(package_name)}\."
        r"(?P<from_version>\d+(?:\.\d+)*)"
        r"-"
        r"(?P<to_version>(?:\d+\.)*(?P<target>\d+))"
        r"\.upd\b",
        re.IGNORECASE,
    )


def parse_trigger_line(line: str, ts: datetime, markers: MarkerSet = DEFAULT_MARKERS) -> Optional[TriggerEvent]:
    """Return a TriggerEvent if `line` names an update file.

    The file name may sit anywhere on the line and the surrounding wording is
    free, so localized logs match too. When `markers.trigger_phrase` is set,
    the line must also contain that phrase (case-insensitive).
    """
    phrase = markers.trigger_phrase
    if phrase and phrase.casefold() not in line.casefold():
        return None
    m = trigger_pattern(markers.package_name).search(line)
    if not m:
        return None
    return TriggerEvent(
        timestamp=ts,
        from_version=m.group("from_version"),
        to_version=m.group("to_version"),
        target_token=m.group("target"),
    )


def scan_for_trigger(
    lines: Sequence[str],
    checkpoint: Optional[datetime] = None,
    markers: MarkerSet = DEFAULT_MARKERS,
) -> Optional[TriggerEvent]:
    """Find the most recent trigger at or after `checkpoint`.

    Lines are expected in chronological order and are walked from the end.
    A line without a readable timestamp is skipped. The first timestamp
    strictly earlier than the checkpoint ends the scan, since nothing before
    it can qualify. A trigger stamped exactly at the checkpoint still counts.
    """
    for line in reversed(lines):
        ts = parse_primary_timestamp(line)
        if ts is None:
            continue
        if checkpoint is not None and ts < checkpoint:
            break
        trigger = parse_trigger_line(line, ts, markers)
        if trigger is not None:
            return trigger
    return None

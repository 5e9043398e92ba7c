"""
Operation block lookup and marker checks for the per-day update log.

The update process brackets each attempt with a start marker and an end
marker. Only the last bracketed block matters: earlier blocks belong to
previous attempts on the same day.
"""

from __future__ import annotations

import re

from update_watch.core.config import MarkerSet
from update_watch.core.models import LocateStatus, MarkerResult, OperationBlock


def locate_operation(text: str, markers: MarkerSet) -> OperationBlock:
    """Return the last operation block in `text`.

    The block runs from the last start marker preceding the last end marker
    through the end of that end marker. An end marker with no start marker
    before it is reported as `NO_START_MARKER`, separately from a log that
    has no end marker at all.
    """
    end_at = text.rfind(markers.end_marker)
    if end_at < 0:
        return OperationBlock.missing(LocateStatus.NO_END_MARKER)

    start_at = text.rfind(markers.start_marker, 0, end_at)
    if start_at < 0:
        return OperationBlock.missing(LocateStatus.NO_START_MARKER, end_marker_offset=end_at)

    end_offset = end_at + len(markers.end_marker)
    return OperationBlock(
        start_offset=start_at,
        end_offset=end_offset,
        content=text[start_at:end_offset],
        status=LocateStatus.FOUND,
    )


def version_pattern(target_token: str, markers: MarkerSet) -> re.Pattern:
    # word boundary keeps "187" from matching "1870"
    return re.compile(rf"{re.escape(markers.version_phrase)}\s*-\s*{re.escape(target_token)}\b")


def validate_markers(content: str, target_token: str, markers: MarkerSet) -> MarkerResult:
    return MarkerResult(
        version_confirmed=bool(version_pattern(target_token, markers).search(content)),
        completion_confirmed=markers.completion_marker in content,
    )

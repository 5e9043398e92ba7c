from __future__ import annotations

from typing import Iterable

from update_watch.core.models import Duration
from update_watch.core.timestamps import parse_detail_timestamp


def measure_duration(lines: Iterable[str]) -> Duration:
    """First and last timestamps of the update log, in one forward pass.

    Lines without the `DD.MM.YY H:MM:SS[.mmm]` prefix are ignored. With no
    timestamped line at all, both ends (and the duration) stay `None`.
    """
    start = end = None
    for line in lines:
        ts = parse_detail_timestamp(line)
        if ts is None:
            continue
        if start is None:
            start = ts
        end = ts
    return Duration(start=start, end=end)

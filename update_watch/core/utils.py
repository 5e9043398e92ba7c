"""
Shared utilities for the update watcher.

Small helpers used by the pipeline nodes and integrations:

- `http_post_json(url, payload, headers, timeout)` — POST a JSON body with
  `httpx` and return the decoded JSON response.
- `read_log_text(path, encoding, missing_kind)` — read a whole log file,
  reporting a missing file as `Err(missing_kind)` and a decoding mismatch as
  `Err(ENCODING_ERROR)` instead of raising.
- `sanitize_server_name(name)` — make a server identifier safe for use in a
  file name.
- `write_json(obj, path)` — write pretty JSON, creating parent directories.
"""

from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, Optional

import httpx

from .errors import Err, EventKind, Ok, Result


def http_post_json(
    url: str,
    payload: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None,
    timeout: float = 15,
) -> Dict[str, Any]:
    """POST `payload` as JSON and return the parsed response body.

    Raises:
        httpx.HTTPError: On connection failures, timeouts and non-2xx replies.
    """
    with httpx.Client(timeout=timeout) as client:
        r = client.post(url, json=payload, headers=headers or {})
        r.raise_for_status()
        if not r.content:
            return {}
        try:
            return r.json()
        except ValueError:
            return {"raw": r.text}


def read_log_text(path: Path, encoding: str, missing_kind: EventKind) -> Result[str]:
    """Read a log file as text.

    Args:
        path: Log file to read.
        encoding: Codec configured for the update process logs.
        missing_kind: Event kind reported when the file does not exist
            (primary and per-day logs map to different kinds).
    """
    if not path.is_file():
        return Err(missing_kind, f"Log file not found: {path}")
    try:
        return Ok(path.read_text(encoding=encoding))
    except UnicodeDecodeError as e:
        return Err(
            EventKind.ENCODING_ERROR,
            f"Cannot decode {path} as {encoding}: {e.reason} at byte {e.start}",
        )
    except OSError as e:
        return Err(EventKind.ENCODING_ERROR, f"Cannot read {path}: {e}")


def sanitize_server_name(name: str) -> str:
    """Replace every character outside [A-Za-z0-9-] with an underscore."""
    return re.sub(r"[^A-Za-z0-9-]", "_", name)


def write_json(obj: object, path: Path) -> None:
    """Write an object as pretty JSON to `path`, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(obj, indent=2, ensure_ascii=False), encoding="utf-8")

"""Core package exports.

Re-exports the small set of types and helpers the detection code, the
integrations and the pipeline share, so callers can write
`from update_watch.core import MonitorConfig, Ok, Err` without deep imports.
"""

from .config import MarkerSet, MonitorConfig, load_config, validate_config
from .errors import Category, Err, EventKind, Ok, Result
from .utils import http_post_json, read_log_text, sanitize_server_name, write_json

__all__ = [
    "Category",
    "Err",
    "EventKind",
    "MarkerSet",
    "MonitorConfig",
    "Ok",
    "Result",
    "http_post_json",
    "load_config",
    "read_log_text",
    "sanitize_server_name",
    "validate_config",
    "write_json",
]

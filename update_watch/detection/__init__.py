"""Pure log analysis: trigger scan, operation block, markers, duration."""

from .classifier import NO_OPERATION_REASON, classify_markers, classify_operation
from .duration import measure_duration
from .operation import locate_operation, validate_markers
from .trigger import parse_trigger_line, scan_for_trigger

__all__ = [
    "NO_OPERATION_REASON",
    "classify_markers",
    "classify_operation",
    "locate_operation",
    "measure_duration",
    "parse_trigger_line",
    "scan_for_trigger",
    "validate_markers",
]

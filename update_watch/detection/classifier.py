from __future__ import annotations

from update_watch.core.config import MarkerSet
from update_watch.core.models import (
    ClassificationResult,
    ClassificationStatus,
    MarkerResult,
    OperationBlock,
)
from .operation import validate_markers

NO_OPERATION_REASON = "no update operation found"


def classify_markers(result: MarkerResult) -> ClassificationResult:
    """Turn marker flags for a located block into a verdict."""
    missing = []
    if not result.version_confirmed:
        missing.append("version confirmation")
    if not result.completion_confirmed:
        missing.append("completion marker")

    if missing:
        status = ClassificationStatus.FAILED
        reason = " and ".join(missing) + " missing"
    else:
        status = ClassificationStatus.SUCCESS
        reason = "version confirmation and completion marker found"

    return ClassificationResult(
        status=status,
        version_confirmed=result.version_confirmed,
        completion_confirmed=result.completion_confirmed,
        operation_found=True,
        reason=reason,
    )


def classify_operation(block: OperationBlock, target_token: str, markers: MarkerSet) -> ClassificationResult:
    if not block.found:
        return ClassificationResult(
            status=ClassificationStatus.FAILED,
            version_confirmed=False,
            completion_confirmed=False,
            operation_found=False,
            reason=NO_OPERATION_REASON,
        )
    return classify_markers(validate_markers(block.content, target_token, markers))

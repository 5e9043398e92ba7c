from __future__ import annotations

import pytest

from update_watch.core.config import MarkerSet
from update_watch.core.models import ClassificationStatus, LocateStatus, MarkerResult, OperationBlock
from update_watch.detection.classifier import NO_OPERATION_REASON, classify_markers, classify_operation
from update_watch.detection.operation import locate_operation


@pytest.mark.parametrize("version", [True, False])
@pytest.mark.parametrize("completion", [True, False])
def test_success_only_when_both_markers_confirmed(version: bool, completion: bool) -> None:
    result = classify_markers(MarkerResult(version_confirmed=version, completion_confirmed=completion))

    assert (result.status is ClassificationStatus.SUCCESS) == (version and completion)
    assert result.operation_found
    if not version:
        assert "version" in result.reason
    if not completion:
        assert "completion" in result.reason


def test_reason_lists_missing_markers_in_fixed_order() -> None:
    result = classify_markers(MarkerResult(version_confirmed=False, completion_confirmed=False))
    assert result.reason == "version confirmation and completion marker missing"


def test_reason_names_only_the_missing_marker() -> None:
    result = classify_markers(MarkerResult(version_confirmed=False, completion_confirmed=True))
    assert "version" in result.reason
    assert "completion" not in result.reason


@pytest.mark.parametrize("status", [LocateStatus.NO_END_MARKER, LocateStatus.NO_START_MARKER])
def test_missing_block_fails_with_no_operation_reason(status: LocateStatus) -> None:
    result = classify_operation(OperationBlock.missing(status), "186", MarkerSet())

    assert result.status is ClassificationStatus.FAILED
    assert not result.operation_found
    assert not result.version_confirmed
    assert not result.completion_confirmed
    assert result.reason == NO_OPERATION_REASON


def test_markers_outside_the_block_do_not_count() -> None:
    markers = MarkerSet()
    text = (
        "Update operation started\nprogram version - 186\nUpdate completed successfully\n"
        "Update operation finished\n"
        "Update operation started\nrollback\nUpdate operation finished\n"
    )
    block = locate_operation(text, markers)
    result = classify_operation(block, "186", markers)
    assert result.status is ClassificationStatus.FAILED
    assert result.reason == "version confirmation and completion marker missing"

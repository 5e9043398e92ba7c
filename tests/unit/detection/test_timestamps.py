from __future__ import annotations

from datetime import datetime

from update_watch.core.timestamps import (
    format_checkpoint,
    parse_checkpoint,
    parse_detail_timestamp,
    parse_primary_timestamp,
)


def test_primary_timestamp_accepts_single_digit_hour() -> None:
    ts = parse_primary_timestamp("23.10.2025 5:00:00 Started download")
    assert ts == datetime(2025, 10, 23, 5, 0, 0)


def test_primary_timestamp_rejects_two_digit_year_and_garbage() -> None:
    assert parse_primary_timestamp("23.10.25 5:00:00 text") is None
    assert parse_primary_timestamp("no timestamp here") is None
    assert parse_primary_timestamp("") is None


def test_primary_timestamp_rejects_impossible_date() -> None:
    assert parse_primary_timestamp("31.02.2025 5:00:00 text") is None


def test_detail_timestamp_drops_milliseconds() -> None:
    ts = parse_detail_timestamp("23.10.25 10:45:23.999 4512 INFO done")
    assert ts == datetime(2025, 10, 23, 10, 45, 23)


def test_detail_timestamp_without_milliseconds() -> None:
    assert parse_detail_timestamp("01.02.24 7:05:09 77 WARN x") == datetime(2024, 2, 1, 7, 5, 9)


def test_detail_timestamp_rejects_four_digit_year() -> None:
    assert parse_detail_timestamp("23.10.2025 10:45:23 text") is None


def test_checkpoint_format_is_zero_padded() -> None:
    assert format_checkpoint(datetime(2025, 1, 2, 3, 4, 5)) == "02.01.2025 03:04:05"


def test_checkpoint_parse_tolerates_trailing_newline_and_rejects_garbage() -> None:
    assert parse_checkpoint("02.01.2025 03:04:05\n") == datetime(2025, 1, 2, 3, 4, 5)
    assert parse_checkpoint("yesterday") is None

"""CSV 행 변환 테스트."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone
from typing import Any

from conftest import make_raw_build
from travis_etl.models import BUILD_CSV_COLUMNS, TravisBuild
from travis_etl.transformer import build_to_row, format_timestamp


class TestBuildToRow:
    """build_to_row 테스트."""

    def test_standard_build(self, sample_build: dict[str, Any]) -> None:
        row = build_to_row(TravisBuild.model_validate(sample_build))

        assert row == [
            "98765",
            "97765",
            "passed",
            "push",
            "dump-target",
            "master",
            "",
            "2019-03-04T10:15:30Z",
            "2019-03-04T10:20:42Z",
            "312",
            "42",
            "octocat",
        ]
        assert len(row) == len(BUILD_CSV_COLUMNS)

    def test_pull_request_build(self) -> None:
        raw = make_raw_build(
            5000,
            event_type="pull_request",
            pull_request_title="Add, quote \"handling\"",
            pull_request_number=9,
        )
        row = build_to_row(TravisBuild.model_validate(raw))

        assert row[3] == "pull_request"
        assert row[6] == 'Add, quote "handling"'

    def test_running_build_without_finish(self) -> None:
        raw = make_raw_build(5001, state="started", finished_at=None, duration=None)
        row = build_to_row(TravisBuild.model_validate(raw))

        assert row[2] == "started"
        assert row[8] == ""
        assert row[9] == ""


class TestFormatTimestamp:
    """format_timestamp 테스트."""

    def test_utc_uses_z_suffix(self) -> None:
        assert format_timestamp(datetime(2020, 1, 2, 3, 4, 5, tzinfo=UTC)) == "2020-01-02T03:04:05Z"

    def test_fixed_offset_kept(self) -> None:
        kst = timezone(timedelta(hours=9))
        assert format_timestamp(datetime(2020, 1, 2, 3, 4, 5, tzinfo=kst)) == "2020-01-02T03:04:05+09:00"

    def test_fraction_truncated(self) -> None:
        dt = datetime(2020, 1, 2, 3, 4, 5, 987654, tzinfo=UTC)
        assert format_timestamp(dt) == "2020-01-02T03:04:05Z"

    def test_naive_treated_as_utc(self) -> None:
        assert format_timestamp(datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02T03:04:05Z"

    def test_none(self) -> None:
        assert format_timestamp(None) == ""

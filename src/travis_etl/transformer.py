"""TravisBuild -> CSV 행 변환기.

BUILD_CSV_COLUMNS 순서대로 12개 필드를 문자열로 평탄화한다.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from travis_etl.models import TravisBuild


def build_to_row(build: TravisBuild) -> list[str]:
    """TravisBuild -> travis-builds.csv 한 행."""
    return [
        str(build.id),
        build.number,
        build.state,
        build.event_type,
        build.repository.name,
        build.branch.name,
        build.pull_request_title or "",
        format_timestamp(build.started_at),
        format_timestamp(build.finished_at),
        _format_int(build.duration),
        str(build.created_by.id),
        build.created_by.login,
    ]


def format_timestamp(dt: datetime | None) -> str:
    """RFC 3339 (초 단위) 문자열. UTC는 Z 접미사, 그 외는 원래 offset 유지."""
    if dt is None:
        return ""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    if dt.utcoffset() == timedelta(0):
        return dt.strftime("%Y-%m-%dT%H:%M:%SZ")
    return dt.isoformat(timespec="seconds")


def _format_int(value: int | None) -> str:
    return "" if value is None else str(value)

"""Travis 빌드 목록 offset pagination 수집기.

페이지 조회 -> sink 기록 -> 진행률 보고를 반복하고,
@pagination.next.offset이 0이면 종료한다.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from travis_etl.client import TravisApiError
from travis_etl.models import BuildPage, TravisBuild

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class PageFetcher(Protocol):
    def fetch_builds(self, repository_id: str, limit: int, offset: int) -> BuildPage: ...


class BuildSink(Protocol):
    def write(self, builds: list[TravisBuild]) -> int: ...


@dataclass
class DrainStats:
    """저장소별 수집 통계."""

    repository_id: str
    starting_offset: int
    pages_fetched: int = 0
    builds_fetched: int = 0
    rows_written: int = 0
    expected_total: int = 0       # @pagination.count - starting_offset
    duration_ms: float = 0.0
    error: str | None = None


def drain(
    repository_id: str,
    starting_offset: int,
    sink: BuildSink,
    client: PageFetcher,
    *,
    limit: int = 100,
    progress: ProgressCallback | None = None,
) -> DrainStats:
    """starting_offset부터 마지막 페이지까지 빌드를 모두 sink로 보낸다.

    흐름:
    1. offset 위치의 페이지 조회 (빈 페이지여도 기록 단계로 진행)
    2. 페이지의 빌드를 sink에 기록, 누적 건수 갱신
    3. 진행률 보고: 누적 건수 / (count - starting_offset)
    4. next.offset != 0 -> offset 갱신 후 1로, == 0 -> 종료

    반복 횟수 상한은 없다. TravisApiError는 stats.error에 기록하고 중단한다.
    """
    stats = DrainStats(repository_id=repository_id, starting_offset=starting_offset)
    start_time = time.monotonic()
    offset = starting_offset

    try:
        while True:
            page = client.fetch_builds(repository_id, limit, offset)
            stats.pages_fetched += 1

            stats.rows_written += sink.write(page.builds)
            stats.builds_fetched += len(page.builds)
            # 디코딩 실패로 받은 빈 페이지(count=0)는 기대 건수를 덮어쓰지 않는다
            if stats.pages_fetched == 1 or page.pagination.count:
                stats.expected_total = max(page.pagination.count - starting_offset, 0)

            logger.info(
                "Progress: %d of %d", stats.builds_fetched, stats.expected_total,
                extra={"event_code": "PROGRESS",
                       "repository_id": repository_id,
                       "offset": offset,
                       "count": stats.builds_fetched,
                       "total": stats.expected_total},
            )
            if progress is not None:
                progress(stats.builds_fetched, stats.expected_total)

            next_offset = page.pagination.next_offset
            if next_offset == 0:
                break
            offset = next_offset

        if stats.builds_fetched != stats.expected_total:
            logger.warning(
                "Fetched %d builds but provider reported %d",
                stats.builds_fetched, stats.expected_total,
                extra={"event_code": "COUNT_MISMATCH",
                       "repository_id": repository_id,
                       "count": stats.builds_fetched,
                       "total": stats.expected_total},
            )

    except TravisApiError as e:
        stats.error = str(e)
        logger.error(
            "Drain aborted (repository=%s, offset=%d): %s",
            repository_id, offset, e,
            extra={"event_code": "DRAIN_ERROR",
                   "repository_id": repository_id,
                   "offset": offset},
        )

    stats.duration_ms = (time.monotonic() - start_time) * 1000
    return stats

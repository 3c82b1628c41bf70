"""CSV 출력 sink.

실행마다 파일을 새로 만들고(기존 내용 삭제) 헤더를 쓴 뒤,
빌드를 받은 순서대로 한 행씩 추가한다.
"""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path
from typing import IO

from travis_etl.models import BUILD_CSV_COLUMNS, TravisBuild
from travis_etl.transformer import build_to_row

logger = logging.getLogger(__name__)


class CsvBuildSink:
    """travis-builds.csv 작성기."""

    def __init__(self, fh: IO[str], path: Path | None = None) -> None:
        self._fh = fh
        self._writer = csv.writer(fh, lineterminator="\n")
        self.path = path
        self.rows_written = 0
        self._closed = False

    @classmethod
    def initialize(cls, path: Path) -> CsvBuildSink:
        """출력 파일을 생성(truncate)하고 헤더 행을 쓴다."""
        path.parent.mkdir(parents=True, exist_ok=True)
        fh = open(path, "w", encoding="utf-8", newline="")
        sink = cls(fh, path)
        sink._writer.writerow(BUILD_CSV_COLUMNS)
        logger.info("CSV created: %s", path, extra={"event_code": "CSV_CREATED"})
        return sink

    def write(self, builds: Iterable[TravisBuild]) -> int:
        """빌드를 순서대로 한 행씩 추가한다. 추가한 행 수를 반환."""
        written = 0
        for build in builds:
            self._writer.writerow(build_to_row(build))
            written += 1
        self.rows_written += written
        return written

    def close(self) -> None:
        """버퍼를 flush하고 파일을 닫는다. 여러 번 호출해도 한 번만 닫힌다."""
        if self._closed:
            return
        self._fh.flush()
        self._fh.close()
        self._closed = True
        logger.info(
            "CSV closed: %s (%d rows)", self.path, self.rows_written,
            extra={"event_code": "CSV_CLOSED", "count": self.rows_written},
        )

    def __enter__(self) -> CsvBuildSink:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

"""JSON 구조화 로깅 설정.

진행률(PROGRESS) 같은 이벤트는 extra 필드로 구조화해서 남긴다.
로그는 항상 stderr로 보내 CSV 출력과 섞이지 않게 한다.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import IO, Any

# LogRecord extra 중 JSON 로그에 포함할 필드
STRUCTURED_FIELDS = (
    "event_code",
    "repository_id",
    "offset",
    "count",
    "total",
    "status_code",
    "duration_ms",
)


class JsonFormatter(logging.Formatter):
    """LogRecord -> 한 줄 JSON."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).strftime(
                "%Y-%m-%dT%H:%M:%SZ"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in STRUCTURED_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(
    *,
    json_format: bool = True,
    level: int = logging.INFO,
    stream: IO[str] | None = None,
) -> None:
    """travis_etl 로거에 핸들러/포매터를 설정한다."""
    logger = logging.getLogger("travis_etl")
    logger.setLevel(level)
    logger.handlers.clear()
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)
    if json_format:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(
            logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")
        )
    logger.addHandler(handler)

"""Travis ETL CLI.

travis-etl fetch --config config.yaml --json-log
travis-etl fetch --repo-id owner/name --offset 7200 --output data/builds.csv
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from travis_etl.client import TravisClient
from travis_etl.config import load_config
from travis_etl.drain import DrainStats, drain
from travis_etl.logging_config import setup_logging
from travis_etl.sink import CsvBuildSink

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(version="0.1.0")
def main() -> None:
    """Travis CI 빌드 이력 수집 ETL."""


@main.command()
@click.option("--config", "config_path", type=click.Path(exists=True, path_type=Path),
              default=None, help="설정 파일 경로 (기본: config.yaml)")
@click.option("--repo-id", default=None, help="대상 저장소 ID 또는 slug (설정 파일보다 우선)")
@click.option("--offset", type=click.IntRange(min=0), default=None, help="시작 offset")
@click.option("--limit", type=click.IntRange(1, 100), default=None, help="페이지 크기 (1~100)")
@click.option("--output", "output_path", type=click.Path(dir_okay=False, path_type=Path),
              default=None, help="CSV 출력 경로")
@click.option("--strict-decode", is_flag=True, help="응답 디코딩 실패 시 즉시 중단")
@click.option("--json-log", is_flag=True, help="JSON 형태 로그 출력")
def fetch(
    config_path: Path | None,
    repo_id: str | None,
    offset: int | None,
    limit: int | None,
    output_path: Path | None,
    strict_decode: bool,
    json_log: bool,
) -> None:
    """저장소의 빌드 이력을 전부 조회해 CSV로 저장한다."""
    setup_logging(json_format=json_log)

    overrides: dict[str, Any] = {}
    if repo_id is not None:
        overrides["repository_id"] = repo_id
    if offset is not None:
        overrides["start_offset"] = offset
    travis_overrides: dict[str, Any] = {}
    if limit is not None:
        travis_overrides["limit"] = limit
    if strict_decode:
        travis_overrides["strict_decode"] = True
    if travis_overrides:
        overrides["travis"] = travis_overrides

    try:
        config = load_config(config_path, overrides=overrides)
    except ValidationError as e:
        click.echo(f"Invalid configuration: {e}", err=True)
        sys.exit(1)
    travis_config = config.travis
    output = output_path or config.output.path

    try:
        client = TravisClient(travis_config)
    except RuntimeError as e:
        click.echo(str(e), err=True)
        sys.exit(1)

    logger.info(
        "Starting drain: %s from offset %d -> %s",
        config.repository_id, config.start_offset, output,
        extra={"event_code": "DRAIN_START",
               "repository_id": config.repository_id,
               "offset": config.start_offset},
    )
    with client, CsvBuildSink.initialize(output) as sink:
        stats = drain(
            config.repository_id,
            config.start_offset,
            sink,
            client,
            limit=travis_config.limit,
        )

    _log_summary(stats, client.decode_failures)
    click.echo(f"Wrote {stats.rows_written} builds to {output}")

    # 치명적 에러(요청/네트워크/HTTP)면 exit code 1
    if stats.error:
        click.echo(f"[ERROR] {stats.error}", err=True)
        sys.exit(1)


def _log_summary(stats: DrainStats, decode_failures: int) -> None:
    """실행 요약을 로깅한다."""
    logger.info(
        "Fetch summary: repository=%s, pages=%d, builds=%d/%d, rows=%d, "
        "decode_failures=%d, %.1fs, error=%s",
        stats.repository_id, stats.pages_fetched, stats.builds_fetched,
        stats.expected_total, stats.rows_written, decode_failures,
        stats.duration_ms / 1000, stats.error,
        extra={
            "event_code": "FETCH_SUMMARY",
            "repository_id": stats.repository_id,
            "count": stats.rows_written,
            "total": stats.expected_total,
            "duration_ms": round(stats.duration_ms, 1),
        },
    )

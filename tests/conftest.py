"""공통 fixture."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest
import yaml


def make_raw_build(build_id: int, **overrides: Any) -> dict[str, Any]:
    """테스트용 Travis 빌드 응답 생성."""
    raw: dict[str, Any] = {
        "@type": "build",
        "@href": f"/build/{build_id}",
        "@representation": "standard",
        "@permissions": {"read": True, "cancel": False, "restart": False},
        "id": build_id,
        "number": str(build_id - 1000),
        "state": "passed",
        "duration": 312,
        "event_type": "push",
        "previous_state": "failed",
        "pull_request_title": None,
        "pull_request_number": None,
        "started_at": "2019-03-04T10:15:30Z",
        "finished_at": "2019-03-04T10:20:42Z",
        "repository": {
            "@type": "repository",
            "@href": "/repo/12345",
            "@representation": "minimal",
            "id": 12345,
            "name": "dump-target",
            "slug": "pseudolab/dump-target",
        },
        "branch": {
            "@type": "branch",
            "@href": "/repo/12345/branch/master",
            "@representation": "minimal",
            "name": "master",
        },
        "tag": None,
        "commit": {
            "@type": "commit",
            "@representation": "minimal",
            "id": 555,
            "sha": "a1b2c3d4",
            "ref": "refs/heads/master",
            "message": "Fix flaky test",
            "compare_url": "https://github.com/pseudolab/dump-target/compare/a...b",
            "committed_at": "2019-03-04T10:14:00Z",
        },
        "jobs": [{"@type": "job", "@href": "/job/1", "@representation": "minimal", "id": 1}],
        "stages": [],
        "created_by": {
            "@type": "user",
            "@href": "/user/42",
            "@representation": "minimal",
            "id": 42,
            "login": "octocat",
        },
    }
    raw.update(overrides)
    return raw


def make_page(
    builds: list[dict[str, Any]],
    *,
    count: int,
    offset: int = 0,
    limit: int = 100,
    next_offset: int | None = None,
) -> dict[str, Any]:
    """테스트용 빌드 목록 응답 생성. next_offset=None이면 마지막 페이지."""
    next_link = None
    if next_offset is not None:
        next_link = {
            "@href": f"/repo/12345/builds?limit={limit}&offset={next_offset}",
            "offset": next_offset,
            "limit": limit,
        }
    return {
        "@type": "builds",
        "@href": f"/repo/12345/builds?limit={limit}&offset={offset}",
        "@representation": "standard",
        "@pagination": {
            "limit": limit,
            "offset": offset,
            "count": count,
            "is_first": offset == 0,
            "is_last": next_offset is None,
            "next": next_link,
            "prev": None,
            "first": {"@href": f"/repo/12345/builds?limit={limit}", "offset": 0, "limit": limit},
            "last": {"@href": f"/repo/12345/builds?limit={limit}", "offset": 0, "limit": limit},
        },
        "builds": builds,
    }


@pytest.fixture(autouse=True)
def _reset_logging():
    """CLI 테스트가 붙인 핸들러(CliRunner stderr)를 다음 테스트로 넘기지 않는다."""
    yield
    logger = logging.getLogger("travis_etl")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture()
def sample_build() -> dict[str, Any]:
    """Travis API 빌드 응답 샘플."""
    return make_raw_build(98765)


@pytest.fixture()
def sample_config_data() -> dict[str, Any]:
    """테스트용 config dict."""
    return {
        "travis": {
            "api_base": "https://api.travis-ci.com",
            "limit": 100,
            "request_timeout_sec": 5,
        },
        "repository_id": "12345",
        "start_offset": 0,
        "output": {"path": "travis-builds.csv"},
    }


@pytest.fixture()
def tmp_config_file(tmp_path: Path, sample_config_data: dict[str, Any]) -> Path:
    """임시 config.yaml 파일."""
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.dump(sample_config_data), encoding="utf-8")
    return config_path

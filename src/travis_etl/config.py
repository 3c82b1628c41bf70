"""YAML 설정 로딩 + Pydantic 모델."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

_DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "config.yaml"


# ── 설정 모델 ──────────────────────────────────────────


class TravisApiConfig(BaseModel):
    api_base: str = "https://api.travis-ci.com"
    api_version: str = "3"
    limit: int = Field(default=100, ge=1, le=100)
    request_timeout_sec: float = 30.0
    token_env_var: str = "TRAVIS_API_TOKEN"
    sort_by: str = "started_at:desc"
    strict_decode: bool = False  # True면 디코딩 실패 시 중단
    user_agent: str = "travis-etl/0.1.0"


class OutputConfig(BaseModel):
    path: Path = Path("travis-builds.csv")


class AppConfig(BaseModel):
    """애플리케이션 전체 설정."""

    travis: TravisApiConfig = Field(default_factory=TravisApiConfig)
    repository_id: str
    start_offset: int = Field(default=0, ge=0)
    output: OutputConfig = Field(default_factory=OutputConfig)

    @field_validator("repository_id")
    @classmethod
    def repository_id_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("repository_id must not be empty")
        return v


# ── 로딩 ───────────────────────────────────────────────


def load_config(
    path: Path | None = None,
    *,
    overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """YAML 설정 파일을 로딩하고 Pydantic 모델로 검증한다.

    우선순위: overrides(CLI 옵션) > 시스템 환경변수 > .env 파일 > config.yaml 기본값
    overrides의 `travis` 항목은 travis 섹션에 병합된다. 검증은 병합 후 한 번만 한다.
    """
    config_path = path or _DEFAULT_CONFIG_PATH

    # .env 파일 로딩: config.yaml과 같은 디렉터리의 .env를 탐색
    dotenv_path = config_path.parent / ".env"
    load_dotenv(dotenv_path=dotenv_path, override=False)

    with open(config_path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raise ValueError(f"Empty config file: {config_path}")

    if repo_id := os.environ.get("TRAVIS_REPO_ID"):
        raw["repository_id"] = repo_id
    if api_base := os.environ.get("TRAVIS_API_BASE"):
        raw.setdefault("travis", {})
        raw["travis"]["api_base"] = api_base

    for key, value in (overrides or {}).items():
        if key == "travis":
            raw.setdefault("travis", {})
            raw["travis"].update(value)
        else:
            raw[key] = value

    return AppConfig.model_validate(raw)

"""Travis CI v3 REST API 클라이언트.

GET /repo/{repository_id}/builds 한 페이지를 조회한다.
- httpx 기반 동기 클라이언트, 호출당 요청 1회 (재시도/캐시 없음)
- 요청 생성/네트워크/HTTP 에러는 TravisApiError로 올린다
- 응답 디코딩 실패는 경고 로그 후 빈 페이지를 반환 (strict_decode=True면 예외)
"""

from __future__ import annotations

import logging
import os
from urllib.parse import quote

import httpx
import orjson
from pydantic import ValidationError

from travis_etl.config import TravisApiConfig
from travis_etl.models import BuildPage

logger = logging.getLogger(__name__)


class TravisApiError(Exception):
    """Travis API 호출 실패. status_code=0은 요청 생성/전송 단계 실패."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        super().__init__(f"Travis API error {status_code}: {message}")


class TravisDecodeError(TravisApiError):
    """응답 본문을 BuildPage로 디코딩하지 못함 (strict_decode 모드 전용)."""


class TravisClient:
    """Travis CI v3 REST API 클라이언트."""

    def __init__(self, config: TravisApiConfig, token: str | None = None) -> None:
        self._config = config
        self._token = token or os.environ.get(config.token_env_var, "")
        if not self._token:
            raise RuntimeError(f"환경변수 {config.token_env_var}이 설정되지 않았습니다")

        self._client = httpx.Client(
            base_url=config.api_base.rstrip("/"),
            headers={
                "Travis-API-Version": config.api_version,
                "Authorization": f"token {self._token}",
                "User-Agent": config.user_agent,
            },
            timeout=config.request_timeout_sec,
        )
        self.decode_failures = 0

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> TravisClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def fetch_builds(self, repository_id: str, limit: int, offset: int) -> BuildPage:
        """빌드 목록 한 페이지를 조회한다.

        Args:
            repository_id: 숫자 ID 또는 owner/name slug
            limit: 페이지 크기 (1~100)
            offset: 건너뛸 빌드 수 (started_at 내림차순 기준)

        Returns:
            BuildPage. 디코딩 실패 시 BuildPage.empty()

        4xx/5xx 응답은 본문을 디코딩하지 않고 바로 TravisApiError로 올린다.
        디코딩 실패(빈 페이지 반환)보다 엄격한 처리로, 인증 실패나 잘못된
        저장소 ID가 빈 저장소처럼 보이지 않게 한다.

        Raises:
            TravisApiError: 요청 생성 실패, 네트워크 에러, HTTP 에러 응답
            TravisDecodeError: strict_decode 모드에서 디코딩 실패
        """
        path = f"/repo/{quote(repository_id, safe='')}/builds"
        params = {
            "limit": limit,
            "offset": offset,
            "sort_by": self._config.sort_by,
        }

        try:
            resp = self._client.get(path, params=params)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as e:
            raise TravisApiError(0, f"Invalid request: {e}") from e
        except httpx.TransportError as e:
            raise TravisApiError(0, f"{type(e).__name__}: {e}") from e

        if resp.is_error:
            logger.error(
                "Build list request failed: HTTP %d",
                resp.status_code,
                extra={"event_code": "HTTP_ERROR",
                       "repository_id": repository_id,
                       "offset": offset,
                       "status_code": resp.status_code},
            )
            raise TravisApiError(resp.status_code, resp.text[:200])

        try:
            return BuildPage.from_api_response(orjson.loads(resp.content))
        except (orjson.JSONDecodeError, ValidationError) as e:
            self.decode_failures += 1
            if self._config.strict_decode:
                raise TravisDecodeError(resp.status_code, f"Undecodable build page: {e}") from e
            logger.warning(
                "Failed to decode build page (offset=%d): %s",
                offset, e,
                extra={"event_code": "DECODE_FAILED",
                       "repository_id": repository_id,
                       "offset": offset},
            )
            return BuildPage.empty()

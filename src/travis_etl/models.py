"""Travis CI v3 API 응답 데이터 모델.

GET /repo/{id}/builds 응답(`builds` + `@pagination`)을 정규화한다.
`@type`, `@href`, `@permissions`, `jobs`, `stages` 등 CSV에 쓰지 않는 필드는 무시한다.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, get_origin

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

# Travis는 pull_request_number, tag 등을 null / 숫자 / 문자열로 섞어서 내려준다
OpaqueValue = int | str | None

# null로 온 필드를 대체할 zero value (Optional이 아닌 필드에만 적용)
_NULL_DEFAULTS: dict[Any, Any] = {str: "", int: 0, bool: False}


class _WireModel(BaseModel):
    """API 응답 공통 설정: 모르는 필드 무시, 생성 후 불변."""

    model_config = ConfigDict(extra="ignore", frozen=True, populate_by_name=True)

    @field_validator("*", mode="before")
    @classmethod
    def null_to_zero_value(cls, v: Any, info: ValidationInfo) -> Any:
        # 빌드 하나의 null 필드 때문에 페이지 전체가 버려지지 않도록 한다
        if v is not None:
            return v
        annotation = cls.model_fields[info.field_name].annotation
        if get_origin(annotation) is list:
            return []
        if annotation in _NULL_DEFAULTS:
            return _NULL_DEFAULTS[annotation]
        if isinstance(annotation, type) and issubclass(annotation, _WireModel):
            return {}
        return v


class TravisUser(_WireModel):
    id: int = 0
    login: str = ""


class TravisRepository(_WireModel):
    id: int = 0
    name: str = ""
    slug: str = ""


class TravisBranch(_WireModel):
    name: str = ""


class TravisTag(_WireModel):
    name: str = ""


class TravisCommit(_WireModel):
    id: int = 0
    sha: str = ""
    ref: str | None = None
    message: str = ""
    compare_url: str = ""
    committed_at: datetime | None = None


class TravisBuild(_WireModel):
    """Travis 빌드 한 건 (standard representation)."""

    id: int
    number: str = ""
    state: str = ""                               # created/started/passed/failed/errored/canceled
    previous_state: str | None = None
    event_type: str = ""                          # push/pull_request/cron/api
    duration: int | None = None                   # 초 단위
    pull_request_title: str | None = None
    pull_request_number: OpaqueValue = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    repository: TravisRepository = Field(default_factory=TravisRepository)
    branch: TravisBranch = Field(default_factory=TravisBranch)
    tag: TravisTag | OpaqueValue = None
    commit: TravisCommit = Field(default_factory=TravisCommit)
    created_by: TravisUser = Field(default_factory=TravisUser)


class PageLink(_WireModel):
    """@pagination의 next/prev/first/last 항목."""

    href: str = Field(default="", alias="@href")
    offset: int = 0
    limit: int = 0


class Pagination(_WireModel):
    limit: int = 0
    offset: int = 0
    count: int = 0                                # 전체 빌드 수
    is_first: bool = False
    is_last: bool = False
    next: PageLink | None = None
    prev: PageLink | None = None
    first: PageLink | None = None
    last: PageLink | None = None

    @property
    def next_offset(self) -> int:
        """다음 페이지 offset. 다음 페이지가 없으면 0."""
        return self.next.offset if self.next is not None else 0


class BuildPage(_WireModel):
    """빌드 목록 응답 한 페이지."""

    builds: list[TravisBuild] = Field(default_factory=list)
    pagination: Pagination = Field(default_factory=Pagination, alias="@pagination")

    @classmethod
    def from_api_response(cls, raw: Any) -> BuildPage:
        """디코딩된 JSON -> BuildPage. 형식이 다르면 ValidationError."""
        return cls.model_validate(raw)

    @classmethod
    def empty(cls) -> BuildPage:
        """디코딩 실패 시 사용하는 zero-value 페이지."""
        return cls()


# CSV 헤더 (컬럼 순서 고정)
BUILD_CSV_COLUMNS = [
    "ID", "Number", "State", "EventType", "RepositoryName", "BranchName",
    "PullRequestTitle", "StartedAt", "FinishedAt", "Duration",
    "CreatedByID", "CreatedByLogin",
]

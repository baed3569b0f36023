"""검색 도메인 타입 정의"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from app.domains.bookmarks.schemas import BookmarkRecord

# 구조화 필터 필드 (keywords 제외)
STRUCTURED_FILTER_FIELDS = (
    "text",
    "site",
    "name",
    "tag",
    "type",
    "date",
    "exact",
)


class ContinuationMode(str, Enum):
    """파서 이어붙이기 모드

    site/name/type 필터 뒤에 오는 일반 토큰을 해당 필터 값에 공백으로
    이어붙입니다.
    """

    NONE = "none"
    SITE = "site"
    NAME = "name"
    TYPE = "type"


class SearchSource(str, Enum):
    """검색 결과 출처"""

    LOCAL = "local"  # 로컬 캐시
    REMOTE = "remote"  # 원격 유사도 검색 / 페이지 조회
    FALLBACK = "fallback"  # 원격 부분 문자열 검색


@dataclass
class ParsedFilters:
    """검색어 파싱 결과

    Attributes:
        keywords: 일반 키워드 (모두 일치해야 함, AND)
        text: 사용자 노트 전용 검색어
        site: 원본 URL 검색어 (공백 구분 OR)
        name: 채널/작성자 이름 검색어 (공백 구분 OR)
        tag: 태그 부분 문자열
        type: 콘텐츠 타입 (대소문자 무시 완전 일치)
        date: 날짜 필터 토큰 (예: "last week", "15/08/2025")
        exact: 제목 정확 구문

    Example::

        filters = parse_query('site:youtube date:last week "lo-fi" chill')
        filters.site  # "youtube"
        filters.date  # "last week"
        filters.exact  # "lo-fi"
        filters.keywords  # ["chill"]
    """

    keywords: list[str] = field(default_factory=list)
    text: Optional[str] = None
    site: Optional[str] = None
    name: Optional[str] = None
    tag: Optional[str] = None
    type: Optional[str] = None
    date: Optional[str] = None
    exact: Optional[str] = None

    def has_structured_filters(self) -> bool:
        """keywords 외의 필터가 하나라도 있는지 여부"""
        return any(getattr(self, name) for name in STRUCTURED_FILTER_FIELDS)


@dataclass(frozen=True)
class DateRange:
    """날짜 범위 (양 끝 포함)"""

    start_date: datetime
    end_date: datetime

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValueError("start_date must not be after end_date")

    def contains(self, moment: datetime) -> bool:
        return self.start_date <= moment <= self.end_date


@dataclass
class SearchResult:
    """검색 결과

    Attributes:
        items: 결과 레코드
        has_more: 다음 페이지 존재 여부 (로컬 결과는 항상 False)
        source: 결과 출처
        filters: 파싱된 필터
        request_id: 검색 요청 ID (SearchSession 발급, 선택)
    """

    items: list[BookmarkRecord]
    has_more: bool
    source: SearchSource
    filters: ParsedFilters
    request_id: Optional[int] = None

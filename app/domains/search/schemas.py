"""검색 도메인 스키마 정의"""

from dataclasses import asdict
from typing import Optional

from pydantic import BaseModel, Field

from app.domains.bookmarks.schemas import BookmarkRecord
from app.domains.search.types import ParsedFilters, SearchResult, SearchSource


class ParsedFiltersResponse(BaseModel):
    """파싱된 필터"""

    keywords: list[str] = Field(default_factory=list, description="일반 키워드")
    text: Optional[str] = Field(None, description="사용자 노트 검색어")
    site: Optional[str] = Field(None, description="원본 URL 검색어")
    name: Optional[str] = Field(None, description="채널/작성자 이름 검색어")
    tag: Optional[str] = Field(None, description="태그 검색어")
    type: Optional[str] = Field(None, description="콘텐츠 타입")
    date: Optional[str] = Field(None, description="날짜 필터 토큰")
    exact: Optional[str] = Field(None, description="제목 정확 구문")

    @classmethod
    def from_filters(cls, filters: ParsedFilters) -> "ParsedFiltersResponse":
        return cls(**asdict(filters))


class SearchResponse(BaseModel):
    """검색 응답"""

    items: list[BookmarkRecord] = Field(default_factory=list)
    has_more: bool = Field(..., description="다음 페이지 존재 여부")
    source: SearchSource = Field(..., description="결과 출처")
    filters: ParsedFiltersResponse
    request_id: Optional[int] = Field(
        None, description="클라이언트가 보낸 검색 요청 ID (최신 응답 판별용)"
    )

    @classmethod
    def from_result(cls, result: SearchResult) -> "SearchResponse":
        return cls(
            items=result.items,
            has_more=result.has_more,
            source=result.source,
            filters=ParsedFiltersResponse.from_filters(result.filters),
            request_id=result.request_id,
        )


class ParseResponse(BaseModel):
    """검색어 파싱 결과 (디버깅용)"""

    query: str
    normalized_query: str
    tokens: list[str]
    filters: ParsedFiltersResponse
    has_filters: bool

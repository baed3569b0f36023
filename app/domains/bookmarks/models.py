"""Bookmarks 도메인 모델 정의

원격 저장소의 콘텐츠를 오프라인 검색용으로 보관하는 로컬 캐시 모델입니다.
"""

from typing import Any, Optional

from sqlalchemy import JSON, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base


class Bookmark(Base):
    """북마크 로컬 캐시 모델

    원격 저장소 레코드를 id 기준으로 보관합니다.
    검색 필터가 참조하는 필드는 컬럼으로, 나머지는 payload 에 원본 그대로
    저장합니다.
    """

    __tablename__ = "bookmarks"

    # Primary Key (원격 저장소 ID)
    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        comment="원격 저장소 레코드 ID",
    )

    # Owner
    user_id: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="소유자 ID",
    )

    # Searchable Fields
    title: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="제목",
    )
    summary: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="요약",
    )
    tags: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="태그 (쉼표 구분 문자열)",
    )
    channel_name: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="채널/작성자 이름",
    )
    user_notes: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="사용자 노트",
    )
    original_url: Mapped[Optional[str]] = mapped_column(
        Text,
        nullable=True,
        comment="원본 URL",
    )
    video_type: Mapped[Optional[str]] = mapped_column(
        String(100),
        nullable=True,
        comment="콘텐츠 타입",
    )
    date_added: Mapped[Optional[str]] = mapped_column(
        String(64),
        nullable=True,
        comment="추가 일시 (ISO 8601 문자열)",
    )

    # Raw Data
    payload: Mapped[Optional[dict[str, Any]]] = mapped_column(
        JSON,
        nullable=True,
        comment="원격 레코드 원본 (검색에 쓰이지 않는 필드 포함)",
    )

    # Indexes
    __table_args__ = (
        Index("ix_bookmarks_user_id", "user_id"),
        Index("ix_bookmarks_date_added", "date_added"),
    )

    def __repr__(self) -> str:
        return (
            f"<Bookmark(id={self.id}, user_id={self.user_id}, "
            f"type={self.video_type}, date_added={self.date_added})>"
        )

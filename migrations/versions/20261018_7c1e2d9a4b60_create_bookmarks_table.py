"""create_bookmarks_table

Revision ID: 7c1e2d9a4b60
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "7c1e2d9a4b60"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """업그레이드 마이그레이션: bookmarks 로컬 캐시 테이블 생성"""
    op.create_table(
        "bookmarks",
        sa.Column(
            "id",
            sa.String(length=64),
            nullable=False,
            comment="원격 저장소 레코드 ID",
        ),
        sa.Column(
            "user_id", sa.String(length=64), nullable=True, comment="소유자 ID"
        ),
        sa.Column("title", sa.Text(), nullable=True, comment="제목"),
        sa.Column("summary", sa.Text(), nullable=True, comment="요약"),
        sa.Column(
            "tags", sa.Text(), nullable=True, comment="태그 (쉼표 구분 문자열)"
        ),
        sa.Column(
            "channel_name", sa.Text(), nullable=True, comment="채널/작성자 이름"
        ),
        sa.Column("user_notes", sa.Text(), nullable=True, comment="사용자 노트"),
        sa.Column("original_url", sa.Text(), nullable=True, comment="원본 URL"),
        sa.Column(
            "video_type",
            sa.String(length=100),
            nullable=True,
            comment="콘텐츠 타입",
        ),
        sa.Column(
            "date_added",
            sa.String(length=64),
            nullable=True,
            comment="추가 일시 (ISO 8601 문자열)",
        ),
        sa.Column(
            "payload",
            sa.JSON(),
            nullable=True,
            comment="원격 레코드 원본 (검색에 쓰이지 않는 필드 포함)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_bookmarks_user_id", "bookmarks", ["user_id"])
    op.create_index("ix_bookmarks_date_added", "bookmarks", ["date_added"])


def downgrade() -> None:
    """다운그레이드 마이그레이션: bookmarks 테이블 삭제"""
    op.drop_index("ix_bookmarks_date_added", table_name="bookmarks")
    op.drop_index("ix_bookmarks_user_id", table_name="bookmarks")
    op.drop_table("bookmarks")

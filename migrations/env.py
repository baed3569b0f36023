"""로컬 캐시 DB Alembic 환경"""

import sys
from logging.config import fileConfig
from pathlib import Path

from alembic import context
from sqlalchemy import create_engine, pool

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.core.config import settings  # noqa: E402
from app.core.database import Base  # noqa: E402
from app.core.migration import to_sync_url  # noqa: E402
from app.domains.bookmarks.models import Bookmark  # noqa: F401, E402

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name, disable_existing_loggers=False)

SYNC_URL = to_sync_url(settings.database_url)

# SQLite ALTER TABLE 제약 때문에 batch 모드로 렌더링
CONFIGURE_OPTIONS = {
    "target_metadata": Base.metadata,
    "render_as_batch": SYNC_URL.startswith("sqlite"),
    "compare_type": True,
}


def run_offline() -> None:
    """DB 연결 없이 SQL 스크립트 출력"""
    context.configure(
        url=SYNC_URL,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **CONFIGURE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_online() -> None:
    """로컬 캐시 DB에 직접 적용"""
    engine = create_engine(SYNC_URL, poolclass=pool.NullPool)
    try:
        with engine.connect() as connection:
            context.configure(connection=connection, **CONFIGURE_OPTIONS)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        engine.dispose()


if context.is_offline_mode():
    run_offline()
else:
    run_online()

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlalchemy import text

from studyapi import models  # noqa: F401  (테이블 등록)
from studyapi.config import settings
from studyapi.database.connection import engine
from studyapi.database.session import get_db_context
from studyapi.models.base import Base
from studyapi.services.achievement_service import AchievementService


def init_db():
    """데이터베이스 초기화 - 스키마/테이블 생성 후 업적 카탈로그 동기화"""
    try:
        # 스키마 생성
        if engine.dialect.name == "postgresql":
            with engine.connect() as conn:
                conn.execute(
                    text(f"CREATE SCHEMA IF NOT EXISTS {settings.POSTGRES_SCHEMA}")
                )
                conn.commit()

        # 테이블 생성
        Base.metadata.create_all(bind=engine)

        with get_db_context() as db:
            changed = AchievementService(db).sync_catalog()

        print(
            f"Database initialized successfully with schema: {settings.POSTGRES_SCHEMA} "
            f"({changed} achievement definitions synced)"
        )

    except Exception as e:
        print(f"Database initialization failed: {str(e)}")
        raise


if __name__ == "__main__":
    init_db()

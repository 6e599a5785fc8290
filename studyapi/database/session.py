import logging
from contextlib import contextmanager

from studyapi.database.connection import SessionLocal

logger = logging.getLogger(__name__)


def get_db():
    """요청 단위 세션. commit 은 서비스가 하고, 예외로 끝난 요청의 미완료 트랜잭션은 버린다."""
    db = SessionLocal()
    try:
        yield db
    except Exception:
        if db.in_transaction():
            logger.warning("Rolling back unfinished transaction after request error")
            db.rollback()
        raise
    finally:
        db.close()


@contextmanager
def get_db_context():
    """스크립트용 세션 범위 - 정상 종료 시 commit, 예외 시 rollback"""
    db = SessionLocal()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()

import os

# 앱 모듈을 import 하기 전에 설정 (engine 은 import 시점에 만들어진다)
os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from studyapi import models  # noqa: F401
from studyapi.config import Settings
from studyapi.containers import container
from studyapi.core.security import ServiceRole, create_access_token
from studyapi.database.session import get_db
from studyapi.main import app
from studyapi.models.base import Base
from studyapi.schemas.coins import CoinAdjustmentRequest
from studyapi.schemas.resource import ResourceCreate
from studyapi.schemas.user import Identity, UserCreate
from studyapi.services.achievement_service import AchievementService
from studyapi.services.coin_service import CoinService
from studyapi.services.resource_service import ResourceService
from studyapi.services.user_service import UserService


@pytest.fixture
def engine():
    """테스트마다 새 in-memory SQLite"""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(
        autocommit=False, autoflush=False, bind=engine, expire_on_commit=False
    )
    with factory() as session:
        AchievementService(session).sync_catalog()
    return factory


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def settings() -> Settings:
    return container.config.config()


@pytest.fixture
def role() -> ServiceRole:
    return ServiceRole.internal()


@pytest.fixture
def make_user(db, settings, role):
    """계정 생성 헬퍼 - coins 만큼 bonus 로 적립"""

    def _make_user(user_id: str, coins: int = 0, **profile):
        user = UserService(db, settings, role).create_account(
            Identity(user_id=user_id, email=f"{user_id}@example.com"),
            UserCreate(**profile),
        )
        if coins:
            CoinService(db, role).adjust_coins(
                CoinAdjustmentRequest(user_id=user_id, amount=coins, reason="test seed"),
                actor="test",
            )
        return user

    return _make_user


@pytest.fixture
def make_resource(db, settings, role):
    """자료 업로드 헬퍼 - 업로더는 업로드 보상을 받는다"""

    def _make_resource(owner_id: str, coin_price: int = 0, **fields):
        payload = ResourceCreate(
            title=fields.pop("title", "Linear Algebra Notes"),
            file_path=fields.pop("file_path", f"resources/{owner_id}/notes.pdf"),
            file_type=fields.pop("file_type", "pdf"),
            file_size=fields.pop("file_size", 1024),
            coin_price=coin_price,
            **fields,
        )
        return ResourceService(db, settings, role).upload_resource(owner_id, payload).resource

    return _make_resource


@pytest.fixture
def client(session_factory):
    """요청마다 같은 in-memory DB 의 새 세션을 쓰는 테스트 클라이언트"""

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(settings):
    def _auth_headers(user_id: str, email: str = None) -> dict:
        token = create_access_token(user_id, email or f"{user_id}@example.com", settings)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers

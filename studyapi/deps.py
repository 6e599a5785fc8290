from typing import Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from studyapi.config import Settings
from studyapi.containers import container
from studyapi.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError
from studyapi.core.security import ServiceRole, decode_access_token
from studyapi.database.session import get_db
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.user import Identity, User

# Services
from studyapi.services.achievement_service import AchievementService
from studyapi.services.coin_service import CoinService
from studyapi.services.download_service import DownloadService
from studyapi.services.leaderboard_service import LeaderboardService
from studyapi.services.resource_service import ResourceService
from studyapi.services.settings_service import SettingsService
from studyapi.services.user_service import UserService

# JWT Bearer 토큰 스킴
security = HTTPBearer(auto_error=False)


def get_settings() -> Settings:
    return container.config.config()


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    return container.services.user_service(db=db)


def get_resource_service(db: Session = Depends(get_db)) -> ResourceService:
    return container.services.resource_service(db=db)


def get_download_service(db: Session = Depends(get_db)) -> DownloadService:
    return container.services.download_service(db=db)


def get_coin_service(db: Session = Depends(get_db)) -> CoinService:
    return container.services.coin_service(db=db)


def get_achievement_service(db: Session = Depends(get_db)) -> AchievementService:
    return container.services.achievement_service(db=db)


def get_leaderboard_service(db: Session = Depends(get_db)) -> LeaderboardService:
    return container.services.leaderboard_service(db=db)


def get_settings_service(db: Session = Depends(get_db)) -> SettingsService:
    return container.services.settings_service(db=db)


# ============================================================================
# Authentication Dependencies
# ============================================================================


def get_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
) -> Identity:
    """Bearer 토큰 검증 - 계정 존재 여부와 무관 (계정 생성용)"""
    if credentials is None:
        raise AuthenticationError("Authentication required")
    return decode_access_token(credentials.credentials, settings)


def get_current_user(
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
) -> User:
    """인증된 사용자의 계정 조회 - 계정이 없으면 404"""
    user = UserRepository(db).get_by_id(identity.user_id)
    if user is None:
        raise NotFoundError("Account not found. Create an account first.")
    return user


def get_current_active_user(current_user: User = Depends(get_current_user)) -> User:
    """활성 사용자만 허용"""
    if not current_user.is_active:
        raise AuthorizationError("Inactive user account")
    return current_user


def require_admin_or_service_role(
    x_service_key: Optional[str] = Header(None, alias="X-Service-Key"),
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> str:
    """
    신뢰된 내부 호출자(X-Service-Key) 또는 관리자만 허용

    Returns:
        감사 기록용 호출자 식별 문자열
    """
    if x_service_key is not None:
        role = ServiceRole.from_key(x_service_key, settings)
        return f"service:{role.name}"

    if credentials is None:
        raise AuthenticationError("Authentication required")
    identity = decode_access_token(credentials.credentials, settings)
    user = UserRepository(db).get_by_id(identity.user_id)
    if user is None or not user.is_active or not user.is_admin:
        raise AuthorizationError("Admin or service role required")
    return f"admin:{user.id}"

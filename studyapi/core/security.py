import hmac
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError
from pydantic import ValidationError as PydanticValidationError

from studyapi.config import Settings
from studyapi.core.exceptions import AuthenticationError, AuthorizationError
from studyapi.schemas.user import Identity


def create_access_token(
    user_id: str,
    email: str,
    settings: Settings,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """identity provider 와 같은 형식의 access token 발급 (개발/테스트용)"""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {"sub": user_id, "email": email, "exp": expire}
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str, settings: Settings) -> Identity:
    """JWT 검증 후 sub/email 을 Identity 로 반환"""
    try:
        payload = jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options={"verify_aud": bool(settings.JWT_AUDIENCE)},
        )
        return Identity(user_id=payload.get("sub"), email=payload.get("email"))
    except (JWTError, PydanticValidationError):
        raise AuthenticationError("Invalid or expired token")


@dataclass(frozen=True)
class ServiceRole:
    """
    원장 쓰기 권한을 나타내는 capability

    LedgerUpdater 는 이 객체 없이는 생성되지 않는다. 사용자 요청으로는 만들 수
    없고, 서버 내부(컨테이너)나 SERVICE_ROLE_KEY 를 제시한 호출자만 얻는다.
    """

    name: str

    @classmethod
    def internal(cls) -> "ServiceRole":
        return cls(name="internal")

    @classmethod
    def from_key(cls, presented_key: Optional[str], settings: Settings) -> "ServiceRole":
        if not presented_key or not hmac.compare_digest(
            presented_key.encode(), settings.SERVICE_ROLE_KEY.encode()
        ):
            raise AuthorizationError("Service role credential required")
        return cls(name="service_key")


def require_service_role(role: object) -> "ServiceRole":
    if not isinstance(role, ServiceRole):
        raise AuthorizationError("Ledger writes are restricted to the service role")
    return role

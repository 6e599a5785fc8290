import logging

from fastapi import APIRouter, Depends, status

from studyapi.core.exceptions import NotFoundError
from studyapi.deps import get_current_active_user, get_identity, get_user_service
from studyapi.schemas.user import Identity, PublicProfile, User, UserCreate, UserUpdate
from studyapi.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_account(
    payload: UserCreate,
    identity: Identity = Depends(get_identity),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """
    계정 생성 - identity provider 토큰의 sub/email 로 계정을 만든다.

    HTTP Status:
        201: 생성됨
        401: 토큰 없음/유효하지 않음
        409: 이미 존재하는 계정/이메일/사용자명
    """
    return user_service.create_account(identity, payload)


@router.get("/me", response_model=User)
async def get_me(current_user: User = Depends(get_current_active_user)) -> User:
    """내 프로필 (코인/카운터 포함)"""
    return current_user


@router.patch("/me", response_model=User)
async def update_me(
    update: UserUpdate,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> User:
    """내 프로필 수정"""
    updated = user_service.update_profile(current_user.id, update)
    if updated is None:
        raise NotFoundError("Account not found")
    return updated


@router.get("/{user_id}", response_model=PublicProfile)
async def get_public_profile(
    user_id: str,
    current_user: User = Depends(get_current_active_user),
    user_service: UserService = Depends(get_user_service),
) -> PublicProfile:
    """다른 사용자의 공개 프로필"""
    profile = user_service.get_public_profile(user_id)
    if profile is None:
        raise NotFoundError(f"User {user_id} not found")
    return profile

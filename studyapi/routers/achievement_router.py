from typing import List

from fastapi import APIRouter, Depends

from studyapi.core.exceptions import NotFoundError
from studyapi.deps import get_achievement_service, get_current_active_user
from studyapi.schemas.achievement import (
    Achievement,
    AchievementProgress,
    EvaluationResult,
    UserAchievementEntry,
)
from studyapi.schemas.user import User
from studyapi.services.achievement_service import AchievementService

router = APIRouter(prefix="/achievements", tags=["achievements"])


@router.get("", response_model=List[Achievement])
async def list_achievements(
    current_user: User = Depends(get_current_active_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> List[Achievement]:
    """업적 카탈로그"""
    return achievement_service.list_catalog()


@router.get("/me", response_model=List[UserAchievementEntry])
async def list_my_achievements(
    current_user: User = Depends(get_current_active_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> List[UserAchievementEntry]:
    """내가 획득한 업적"""
    return achievement_service.list_user_achievements(current_user.id)


@router.get("/me/progress", response_model=List[AchievementProgress])
async def get_my_progress(
    current_user: User = Depends(get_current_active_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> List[AchievementProgress]:
    progress = achievement_service.get_progress(current_user.id)
    if progress is None:
        raise NotFoundError("Account not found")
    return progress


@router.post("/me/evaluate", response_model=EvaluationResult)
async def evaluate_my_achievements(
    current_user: User = Depends(get_current_active_user),
    achievement_service: AchievementService = Depends(get_achievement_service),
) -> EvaluationResult:
    """업적 재평가 (멱등)"""
    result = achievement_service.evaluate_user(current_user.id)
    if result is None:
        raise NotFoundError("Account not found")
    return result

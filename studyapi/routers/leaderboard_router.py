from fastapi import APIRouter, Depends, Query

from studyapi.core.exceptions import NotFoundError
from studyapi.deps import get_current_active_user, get_leaderboard_service
from studyapi.schemas.leaderboard import LeaderboardMetric, LeaderboardResponse, UserRankResponse
from studyapi.schemas.pagination import PaginationLimits
from studyapi.schemas.user import User
from studyapi.services.leaderboard_service import LeaderboardService

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


@router.get("", response_model=LeaderboardResponse)
async def get_leaderboard(
    metric: LeaderboardMetric = Query(LeaderboardMetric.COINS),
    limit: int = Query(
        PaginationLimits.LEADERBOARD["default"],
        ge=PaginationLimits.LEADERBOARD["min"],
        le=PaginationLimits.LEADERBOARD["max"],
    ),
    current_user: User = Depends(get_current_active_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> LeaderboardResponse:
    return leaderboard_service.get_leaderboard(metric=metric, limit=limit)


@router.get("/me", response_model=UserRankResponse)
async def get_my_rank(
    metric: LeaderboardMetric = Query(LeaderboardMetric.COINS),
    current_user: User = Depends(get_current_active_user),
    leaderboard_service: LeaderboardService = Depends(get_leaderboard_service),
) -> UserRankResponse:
    rank = leaderboard_service.get_user_rank(current_user.id, metric=metric)
    if rank is None:
        raise NotFoundError("Account not found")
    return rank

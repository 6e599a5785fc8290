import logging
from typing import Optional

from sqlalchemy.orm import Session

from studyapi.config import Settings
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.leaderboard import (
    LeaderboardEntry,
    LeaderboardMetric,
    LeaderboardResponse,
    UserRankResponse,
)
from studyapi.schemas.user import User

logger = logging.getLogger(__name__)

_METRIC_FIELDS = {
    LeaderboardMetric.COINS: "total_coins",
    LeaderboardMetric.UPLOADS: "uploaded_files_count",
    LeaderboardMetric.DOWNLOADS: "downloaded_files_count",
}


class LeaderboardService:
    def __init__(self, db: Session, settings: Settings):
        self.db = db
        self.settings = settings
        self.user_repo = UserRepository(db)

    def get_leaderboard(
        self, metric: LeaderboardMetric = LeaderboardMetric.COINS, limit: int = 10
    ) -> LeaderboardResponse:
        """지표별 상위 사용자. 동점은 가입이 빠른 순"""
        limit = max(1, min(limit, self.settings.LEADERBOARD_MAX_LIMIT))
        rows = self.user_repo.get_leaderboard(metric.value, limit)

        entries = []
        for position, (user_model, achievements_count) in enumerate(rows, start=1):
            user = User.model_validate(user_model)
            entries.append(
                LeaderboardEntry(
                    rank=position,
                    user_id=user.id,
                    display_name=user.display_name,
                    university=user.university,
                    value=getattr(user, _METRIC_FIELDS[metric]),
                    total_coins=user.total_coins,
                    uploaded_files_count=user.uploaded_files_count,
                    downloaded_files_count=user.downloaded_files_count,
                    achievements_count=int(achievements_count or 0),
                )
            )
        return LeaderboardResponse(metric=metric, entries=entries)

    def get_user_rank(
        self, user_id: str, metric: LeaderboardMetric = LeaderboardMetric.COINS
    ) -> Optional[UserRankResponse]:
        """사용자 순위 (competition ranking: 더 높은 값을 가진 사용자 수 + 1)"""
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            return None
        value = getattr(user, _METRIC_FIELDS[metric])
        rank = self.user_repo.count_ranked_above(metric.value, value) + 1
        return UserRankResponse(metric=metric, user_id=user_id, rank=rank, value=value)

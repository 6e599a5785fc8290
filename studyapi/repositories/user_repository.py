from typing import Optional, List
from sqlalchemy import desc, asc, func
from sqlalchemy.orm import Session

from studyapi.models.user import User as UserModel
from studyapi.models.achievement import UserAchievement as UserAchievementModel
from studyapi.schemas.user import User as UserSchema
from studyapi.repositories.base import BaseRepository

# 리더보드 지표 -> 컬럼
_METRIC_COLUMNS = {
    "coins": UserModel.total_coins,
    "uploads": UserModel.uploaded_files_count,
    "downloads": UserModel.downloaded_files_count,
}


class UserRepository(BaseRepository[UserModel, UserSchema]):
    """사용자 계정 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(UserModel, UserSchema, db)

    def get_by_email(self, email: str) -> Optional[UserSchema]:
        return self.get_by_field("email", email)

    def get_by_username(self, username: str) -> Optional[UserSchema]:
        return self.get_by_field("username", username)

    def get_for_update(self, user_id: str) -> Optional[UserModel]:
        """잔액 변경 전 사용자 행 잠금"""
        return self._get_model(user_id, for_update=True)

    def create_account(
        self,
        user_id: str,
        email: str,
        full_name: Optional[str] = None,
        username: Optional[str] = None,
        university: Optional[str] = None,
        major: Optional[str] = None,
        year_of_study: Optional[int] = None,
    ) -> UserModel:
        return self.add(
            id=user_id,
            email=email,
            full_name=full_name,
            username=username,
            university=university,
            major=major,
            year_of_study=year_of_study,
            total_coins=0,
            coins_earned=0,
            coins_spent=0,
            uploaded_files_count=0,
            downloaded_files_count=0,
            is_active=True,
        )

    def get_leaderboard(self, metric: str, limit: int) -> List[tuple]:
        """
        지표 기준 상위 사용자 조회 (활성 사용자만)

        Returns:
            (UserModel, achievements_count) 튜플 리스트
        """
        metric_column = _METRIC_COLUMNS[metric]
        awards = (
            self.db.query(
                UserAchievementModel.user_id.label("user_id"),
                func.count(UserAchievementModel.id).label("awards"),
            )
            .group_by(UserAchievementModel.user_id)
            .subquery()
        )
        return (
            self.db.query(self.model_class, func.coalesce(awards.c.awards, 0))
            .outerjoin(awards, awards.c.user_id == self.model_class.id)
            .filter(self.model_class.is_active.is_(True))
            .order_by(desc(metric_column), asc(self.model_class.created_at), asc(self.model_class.id))
            .limit(limit)
            .all()
        )

    def count_ranked_above(self, metric: str, value: int) -> int:
        """주어진 값보다 지표가 큰 활성 사용자 수 (동점은 같은 순위)"""
        metric_column = _METRIC_COLUMNS[metric]
        return (
            self.db.query(func.count(self.model_class.id))
            .filter(self.model_class.is_active.is_(True), metric_column > value)
            .scalar()
            or 0
        )

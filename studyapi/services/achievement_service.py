import logging
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyapi.core.achievements import (
    DEFAULT_CATALOG,
    AchievementRule,
    CounterSnapshot,
    evaluate,
)
from studyapi.core.exceptions import InternalServerError
from studyapi.models.user import User as UserModel
from studyapi.repositories.achievement_repository import AchievementRepository
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.achievement import (
    Achievement,
    AchievementProgress,
    EvaluationResult,
    UserAchievementEntry,
)

logger = logging.getLogger(__name__)


def _to_rule(achievement: Achievement) -> AchievementRule:
    return AchievementRule(
        code=achievement.code,
        name=achievement.name,
        description=achievement.description or "",
        counter=achievement.counter,
        threshold=achievement.threshold,
        icon=achievement.icon or "",
    )


class AchievementService:
    """업적 평가 및 조회"""

    def __init__(self, db: Session):
        self.db = db
        self.achievement_repo = AchievementRepository(db)
        self.user_repo = UserRepository(db)

    def sync_catalog(self, rules: Optional[List[AchievementRule]] = None) -> int:
        """코드에 정의된 카탈로그를 achievements 테이블에 반영"""
        changed = self.achievement_repo.sync_catalog(rules or DEFAULT_CATALOG)
        self.db.commit()
        logger.info(f"Achievement catalog synced ({changed} definitions changed)")
        return changed

    def grant_earned(self, user: UserModel) -> List[str]:
        """
        호출자의 트랜잭션 안에서 업적 평가 및 부여 (commit 하지 않음)

        user 는 방금 갱신된(그리고 잠긴) 인스턴스여야 한다. 같은 트랜잭션에서
        평가하므로 카운터 갱신과 임계값 비교 사이에 다른 갱신이 끼어들지 않는다.
        """
        catalog = self.achievement_repo.list_catalog()
        by_code = {achievement.code: achievement for achievement in catalog}
        granted = self.achievement_repo.granted_codes(user.id)

        newly = evaluate(
            CounterSnapshot.from_user(user),
            [_to_rule(achievement) for achievement in catalog],
            granted,
        )
        for rule in newly:
            self.achievement_repo.grant(user.id, by_code[rule.code].id)
            logger.info(f"Achievement '{rule.code}' granted to user {user.id}")
        return [rule.code for rule in newly]

    def evaluate_user(self, user_id: str) -> Optional[EvaluationResult]:
        """사용자 업적 재평가. 계정이 없으면 None"""
        try:
            user = self.user_repo.get_for_update(user_id)
            if user is None:
                return None
            codes = self.grant_earned(user)
            self.db.commit()
            return EvaluationResult(user_id=user_id, newly_granted=codes)
        except IntegrityError:
            # 동시 평가가 먼저 부여한 경우: 결과적으로 이미 부여된 상태
            self.db.rollback()
            logger.warning(f"Concurrent achievement grant for user {user_id}")
            return EvaluationResult(user_id=user_id, newly_granted=[])
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to evaluate achievements for user {user_id}: {str(e)}")
            raise InternalServerError("Failed to evaluate achievements")

    def list_catalog(self) -> List[Achievement]:
        return self.achievement_repo.list_catalog()

    def list_user_achievements(self, user_id: str) -> List[UserAchievementEntry]:
        return [
            UserAchievementEntry(achievement=achievement, earned_at=earned_at)
            for achievement, earned_at in self.achievement_repo.list_awards(user_id)
        ]

    def get_progress(self, user_id: str) -> Optional[List[AchievementProgress]]:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            return None
        snapshot = CounterSnapshot.from_user(user)
        earned = {
            achievement.code: earned_at
            for achievement, earned_at in self.achievement_repo.list_awards(user_id)
        }
        return [
            AchievementProgress(
                achievement=achievement,
                current_value=snapshot.value_of(achievement.counter),
                earned=achievement.code in earned,
                earned_at=earned.get(achievement.code),
            )
            for achievement in self.achievement_repo.list_catalog()
        ]

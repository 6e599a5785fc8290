from typing import Dict, Iterable, List, Optional, Set, Tuple

from sqlalchemy import asc
from sqlalchemy.orm import Session

from studyapi.core.achievements import AchievementRule
from studyapi.models.achievement import (
    Achievement as AchievementModel,
    UserAchievement as UserAchievementModel,
)
from studyapi.schemas.achievement import Achievement as AchievementSchema
from studyapi.repositories.base import BaseRepository


class AchievementRepository(BaseRepository[AchievementModel, AchievementSchema]):
    """업적 정의 + 획득 기록 리포지토리"""

    def __init__(self, db: Session):
        super().__init__(AchievementModel, AchievementSchema, db)

    def list_catalog(self) -> List[AchievementSchema]:
        rows = (
            self.db.query(self.model_class)
            .order_by(asc(self.model_class.counter), asc(self.model_class.threshold))
            .all()
        )
        return self._to_schemas(rows)

    def sync_catalog(self, rules: Iterable[AchievementRule]) -> int:
        """코드 기준 upsert. 추가되거나 변경된 정의 수 반환"""
        existing: Dict[str, AchievementModel] = {
            row.code: row for row in self.db.query(self.model_class).all()
        }
        changed = 0
        for rule in rules:
            values = {
                "name": rule.name,
                "description": rule.description,
                "icon": rule.icon,
                "counter": rule.counter,
                "threshold": rule.threshold,
            }
            row = existing.get(rule.code)
            if row is None:
                self.db.add(self.model_class(code=rule.code, **values))
                changed += 1
            elif any(getattr(row, key) != value for key, value in values.items()):
                for key, value in values.items():
                    setattr(row, key, value)
                changed += 1
        self.db.flush()
        return changed

    def granted_codes(self, user_id: str) -> Set[str]:
        rows = (
            self.db.query(self.model_class.code)
            .join(UserAchievementModel, UserAchievementModel.achievement_id == self.model_class.id)
            .filter(UserAchievementModel.user_id == user_id)
            .all()
        )
        return {row[0] for row in rows}

    def grant(self, user_id: str, achievement_id: int) -> UserAchievementModel:
        award = UserAchievementModel(user_id=user_id, achievement_id=achievement_id)
        self.db.add(award)
        self.db.flush()
        return award

    def list_awards(self, user_id: str) -> List[Tuple[AchievementSchema, Optional[object]]]:
        """(업적, 획득 시각) 리스트 - 획득 순"""
        rows = (
            self.db.query(self.model_class, UserAchievementModel.earned_at)
            .join(UserAchievementModel, UserAchievementModel.achievement_id == self.model_class.id)
            .filter(UserAchievementModel.user_id == user_id)
            .order_by(asc(UserAchievementModel.id))
            .all()
        )
        return [(self._to_schema(achievement), earned_at) for achievement, earned_at in rows]

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel


class Achievement(BaseModel):
    id: int
    code: str
    name: str
    description: Optional[str] = None
    icon: Optional[str] = None
    counter: str
    threshold: int

    class Config:
        from_attributes = True


class UserAchievementEntry(BaseModel):
    achievement: Achievement
    earned_at: Optional[datetime] = None


class AchievementProgress(BaseModel):
    """업적 진행 상황 (획득 여부 + 현재 카운터 값)"""

    achievement: Achievement
    current_value: int
    earned: bool
    earned_at: Optional[datetime] = None


class EvaluationResult(BaseModel):
    user_id: str
    newly_granted: List[str]

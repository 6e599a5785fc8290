from enum import Enum
from typing import List, Optional

from pydantic import BaseModel


class LeaderboardMetric(str, Enum):
    COINS = "coins"
    UPLOADS = "uploads"
    DOWNLOADS = "downloads"


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: str
    display_name: str
    university: Optional[str] = None
    value: int
    total_coins: int
    uploaded_files_count: int
    downloaded_files_count: int
    achievements_count: int


class LeaderboardResponse(BaseModel):
    metric: LeaderboardMetric
    entries: List[LeaderboardEntry]


class UserRankResponse(BaseModel):
    metric: LeaderboardMetric
    user_id: str
    rank: int
    value: int

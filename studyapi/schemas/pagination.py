from pydantic import BaseModel, Field
from typing import Generic, TypeVar, List

T = TypeVar("T")


class DirectPaginatedResponse(BaseModel, Generic[T]):
    """직접 응답하는 페이지네이션"""

    data: List[T]
    total_count: int
    has_next: bool
    limit: int
    offset: int


# 엔드포인트별 페이지네이션 제한
class PaginationLimits:
    RESOURCES = {"min": 1, "max": 100, "default": 20}
    COIN_TRANSACTIONS = {"min": 1, "max": 100, "default": 50}
    DOWNLOADS = {"min": 1, "max": 100, "default": 20}
    LEADERBOARD = {"min": 1, "max": 100, "default": 10}

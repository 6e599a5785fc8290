"""
업적 카탈로그와 순수 평가 함수

평가는 저장소와 무관하게 카운터 스냅샷만으로 수행된다. 서비스 계층이
스냅샷을 읽고, 결과로 받은 규칙만 user_achievements 에 기록한다.
"""

from dataclasses import dataclass
from typing import Iterable, List, Set

COUNTERS = (
    "uploaded_files_count",
    "downloaded_files_count",
    "coins_earned",
    "coins_spent",
    "total_coins",
)


@dataclass(frozen=True)
class AchievementRule:
    code: str
    name: str
    description: str
    counter: str
    threshold: int
    icon: str = ""

    def __post_init__(self):
        if self.counter not in COUNTERS:
            raise ValueError(f"Unknown achievement counter: {self.counter}")
        if self.threshold < 1:
            raise ValueError("Achievement threshold must be positive")


@dataclass(frozen=True)
class CounterSnapshot:
    uploaded_files_count: int = 0
    downloaded_files_count: int = 0
    coins_earned: int = 0
    coins_spent: int = 0
    total_coins: int = 0

    @classmethod
    def from_user(cls, user) -> "CounterSnapshot":
        return cls(**{name: int(getattr(user, name) or 0) for name in COUNTERS})

    def value_of(self, counter: str) -> int:
        return getattr(self, counter)


DEFAULT_CATALOG: List[AchievementRule] = [
    AchievementRule("first_upload", "First Upload", "Upload your first resource", "uploaded_files_count", 1, "upload"),
    AchievementRule("contributor", "Active Contributor", "Upload 10 resources", "uploaded_files_count", 10, "books"),
    AchievementRule("knowledge_sharer", "Knowledge Sharer", "Upload 50 resources", "uploaded_files_count", 50, "library"),
    AchievementRule("first_download", "First Download", "Download your first resource", "downloaded_files_count", 1, "download"),
    AchievementRule("avid_learner", "Avid Learner", "Download 25 resources", "downloaded_files_count", 25, "graduation"),
    AchievementRule("coin_collector", "Coin Collector", "Earn 100 coins", "coins_earned", 100, "coins"),
    AchievementRule("coin_magnate", "Coin Magnate", "Earn 1000 coins", "coins_earned", 1000, "treasure"),
    AchievementRule("big_spender", "Big Spender", "Spend 100 coins on resources", "coins_spent", 100, "cart"),
]


def evaluate(
    snapshot: CounterSnapshot,
    rules: Iterable[AchievementRule],
    already_granted: Set[str],
) -> List[AchievementRule]:
    """스냅샷 기준으로 새로 부여할 규칙 목록 반환 (이미 받은 업적 제외)"""
    return [
        rule
        for rule in rules
        if rule.code not in already_granted
        and snapshot.value_of(rule.counter) >= rule.threshold
    ]


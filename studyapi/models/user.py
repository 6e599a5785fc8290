from enum import Enum
from typing import Optional, Union

from sqlalchemy import BigInteger, Boolean, CheckConstraint, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from studyapi.models.base import BaseModel


class UserRole(str, Enum):
    """사용자 역할 정의"""

    USER = "user"  # 일반 사용자
    ADMIN = "admin"  # 관리자

    @classmethod
    def is_admin(cls, role: Union[str, "UserRole"]) -> bool:
        if isinstance(role, cls):
            role = role.value
        return role == cls.ADMIN.value


class User(BaseModel):
    """
    사용자 계정 - 코인 잔액과 활동 카운터를 함께 보관

    total_coins == coins_earned - coins_spent 를 항상 유지하며,
    모든 변경은 LedgerUpdater 를 통해서만 이루어진다.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("total_coins >= 0", name="ck_users_total_coins_non_negative"),
        CheckConstraint(
            "total_coins = coins_earned - coins_spent", name="ck_users_coin_totals"
        ),
        Index("idx_users_total_coins", "total_coins"),
    )

    # identity provider 가 발급한 사용자 ID (ledger 계정 키)
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    email: Mapped[str] = mapped_column(
        String(255), unique=True, nullable=False, index=True
    )
    full_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    username: Mapped[Optional[str]] = mapped_column(
        String(50), unique=True, nullable=True
    )
    university: Mapped[Optional[str]] = mapped_column(String(150), nullable=True)
    major: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    year_of_study: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(20), default=UserRole.USER.value, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    # 코인 누적값
    total_coins: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    coins_earned: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)
    coins_spent: Mapped[int] = mapped_column(BigInteger, default=0, nullable=False)

    # 활동 카운터 (업적 평가 대상)
    uploaded_files_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    downloaded_files_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    def __repr__(self):
        return f"<User(id={self.id}, email={self.email}, total_coins={self.total_coins})>"

    @property
    def is_admin(self) -> bool:
        return UserRole.is_admin(str(self.role))

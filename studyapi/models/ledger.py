"""
코인 원장 데이터 모델

모든 코인 변동(업로드 보상, 다운로드 결제, 보너스, 패널티)은 이 테이블에 기록된다.
레코드는 한번 생성되면 수정/삭제되지 않는다.
"""

import enum
from typing import Optional

from sqlalchemy import BigInteger, Enum, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.schema import UniqueConstraint

from studyapi.models.base import BaseModel, BigIntPK


class TransactionKind(str, enum.Enum):
    EARNED = "earned"
    SPENT = "spent"
    BONUS = "bonus"
    PENALTY = "penalty"


class CoinTransaction(BaseModel):
    """
    코인 원장 테이블

    - 불변성: append-only
    - 멱등성: ref_key 유니크 제약으로 같은 이벤트가 두 번 기록되지 않음
    - 정합성: 사용자별 amount 합계 == users.total_coins
    """

    __tablename__ = "coin_transactions"
    __table_args__ = (
        UniqueConstraint("ref_key", name="uq_coin_transactions_ref_key"),
        Index("idx_coin_transactions_user", "user_id", "id"),
    )

    id: Mapped[int] = mapped_column(BigIntPK, primary_key=True, autoincrement=True)
    user_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("users.id"), nullable=False
    )

    # 양수면 적립, 음수면 차감
    amount: Mapped[int] = mapped_column(BigInteger, nullable=False)
    kind: Mapped[TransactionKind] = mapped_column(
        Enum(
            TransactionKind,
            name="transaction_kind",
            values_callable=lambda kinds: [k.value for k in kinds],
        ),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(Text, nullable=False)

    resource_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("resources.id"), nullable=True
    )
    download_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("downloads.id"), nullable=True
    )

    # 예: "upload:12", "download:34", "bonus:<uuid>"
    ref_key: Mapped[str] = mapped_column(String(100), nullable=False)

    balance_after: Mapped[int] = mapped_column(BigInteger, nullable=False)

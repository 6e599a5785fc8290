from pydantic import BaseModel, Field
from typing import List, Optional
from datetime import datetime

from studyapi.models.ledger import TransactionKind


class CoinBalanceResponse(BaseModel):
    """코인 잔액 응답"""

    user_id: str
    total_coins: int = Field(..., description="현재 코인 잔액")
    coins_earned: int = Field(..., description="누적 적립")
    coins_spent: int = Field(..., description="누적 차감")

    class Config:
        from_attributes = True


class CoinTransactionEntry(BaseModel):
    """코인 원장 항목"""

    id: int
    user_id: str
    amount: int = Field(..., description="코인 변화량 (양수: 적립, 음수: 차감)")
    kind: TransactionKind
    description: str
    resource_id: Optional[int] = None
    download_id: Optional[int] = None
    ref_key: str
    balance_after: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CoinLedgerResponse(BaseModel):
    """코인 원장 조회 응답"""

    balance: int = Field(..., description="현재 잔액")
    entries: List[CoinTransactionEntry]
    total_count: int
    has_next: bool


class CoinAdjustmentRequest(BaseModel):
    """관리자 코인 조정 요청 (양수: bonus, 음수: penalty)"""

    user_id: str = Field(..., min_length=1, max_length=64)
    amount: int = Field(..., description="조정할 코인")
    reason: str = Field(..., min_length=1, max_length=255)


class CoinAdjustmentResponse(BaseModel):
    transaction: CoinTransactionEntry
    balance_after: int
    new_achievements: List[str] = Field(default_factory=list)


class CoinIntegrityCheckResponse(BaseModel):
    """원장 정합성 검증 응답"""

    status: str = Field(..., description="검증 상태 (OK, MISMATCH)")
    user_id: str
    ledger_balance: int
    recorded_balance: int
    ledger_earned: int
    recorded_earned: int
    ledger_spent: int
    recorded_spent: int
    entry_count: int
    verified_at: datetime

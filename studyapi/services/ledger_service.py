"""
코인 원장 업데이트 - 잔액 변경의 유일한 경로

LedgerUpdater 는 사용자 누적값(total/earned/spent)을 조정하고 원장 항목을
하나 추가한다. commit 하지 않으며, 호출한 서비스의 트랜잭션 안에서 함께
커밋되거나 롤백된다.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from studyapi.core.exceptions import (
    ConflictError,
    InsufficientBalanceError,
    NotFoundError,
    ValidationError,
)
from studyapi.core.security import ServiceRole, require_service_role
from studyapi.models.ledger import CoinTransaction, TransactionKind
from studyapi.models.user import User as UserModel
from studyapi.repositories.ledger_repository import LedgerRepository
from studyapi.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)


def _check_sign(kind: TransactionKind, amount: int) -> None:
    if kind in (TransactionKind.EARNED, TransactionKind.BONUS) and amount <= 0:
        raise ValidationError(f"'{kind.value}' transactions require a positive amount")
    if kind == TransactionKind.PENALTY and amount >= 0:
        raise ValidationError("'penalty' transactions require a negative amount")
    if kind == TransactionKind.SPENT and amount > 0:
        raise ValidationError("'spent' transactions cannot be positive")


class LedgerUpdater:
    def __init__(self, db: Session, role: ServiceRole):
        self.role = require_service_role(role)
        self.db = db
        self.user_repo = UserRepository(db)
        self.ledger_repo = LedgerRepository(db)

    def apply(
        self,
        user_id: str,
        amount: int,
        kind: TransactionKind,
        ref_key: str,
        description: str,
        resource_id: Optional[int] = None,
        download_id: Optional[int] = None,
    ) -> CoinTransaction:
        """사용자 행을 잠근 뒤 코인 변동 적용"""
        _check_sign(kind, amount)
        user = self.user_repo.get_for_update(user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return self.apply_to(
            user,
            amount,
            kind,
            ref_key,
            description,
            resource_id=resource_id,
            download_id=download_id,
        )

    def apply_to(
        self,
        user: UserModel,
        amount: int,
        kind: TransactionKind,
        ref_key: str,
        description: str,
        resource_id: Optional[int] = None,
        download_id: Optional[int] = None,
    ) -> CoinTransaction:
        """
        이미 잠금을 획득한 사용자 인스턴스에 코인 변동 적용

        Raises:
            ValidationError: kind 와 amount 부호가 맞지 않는 경우
            InsufficientBalanceError: 결과 잔액이 음수가 되는 경우 (변경 전 거부)
            ConflictError: ref_key 가 이미 기록된 경우
        """
        _check_sign(kind, amount)

        new_total = user.total_coins + amount
        if new_total < 0:
            raise InsufficientBalanceError(
                f"Insufficient balance. Required: {-amount}, Available: {user.total_coins}",
                details={"required": -amount, "available": user.total_coins},
            )

        if self.ledger_repo.exists_ref_key(ref_key):
            raise ConflictError(f"Transaction {ref_key} already recorded")

        if amount > 0:
            user.coins_earned = user.coins_earned + amount
        else:
            user.coins_spent = user.coins_spent - amount
        user.total_coins = user.coins_earned - user.coins_spent
        self.db.flush()

        entry = self.ledger_repo.append(
            user_id=user.id,
            amount=amount,
            kind=kind,
            description=description,
            ref_key=ref_key,
            balance_after=user.total_coins,
            resource_id=resource_id,
            download_id=download_id,
        )
        logger.info(
            f"Ledger {kind.value} {amount:+d} for user {user.id} ({ref_key}), balance {user.total_coins}"
        )
        return entry

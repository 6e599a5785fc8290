import logging
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyapi.core.exceptions import (
    BaseAPIException,
    ConflictError,
    InternalServerError,
    ValidationError,
)
from studyapi.core.security import ServiceRole
from studyapi.models.ledger import TransactionKind
from studyapi.repositories.ledger_repository import LedgerRepository
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.coins import (
    CoinAdjustmentRequest,
    CoinAdjustmentResponse,
    CoinBalanceResponse,
    CoinIntegrityCheckResponse,
    CoinLedgerResponse,
    CoinTransactionEntry,
)
from studyapi.services.achievement_service import AchievementService
from studyapi.services.ledger_service import LedgerUpdater

logger = logging.getLogger(__name__)


class CoinService:
    """코인 잔액/내역 조회, 관리자 조정, 정합성 검증"""

    def __init__(self, db: Session, role: ServiceRole):
        self.db = db
        self.user_repo = UserRepository(db)
        self.ledger_repo = LedgerRepository(db)
        self.ledger = LedgerUpdater(db, role)
        self.achievements = AchievementService(db)

    def get_balance(self, user_id: str) -> Optional[CoinBalanceResponse]:
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            return None
        return CoinBalanceResponse(
            user_id=user.id,
            total_coins=user.total_coins,
            coins_earned=user.coins_earned,
            coins_spent=user.coins_spent,
        )

    def get_transactions(
        self,
        user_id: str,
        kind: Optional[TransactionKind] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> Optional[CoinLedgerResponse]:
        """사용자 코인 거래 내역 (최신순)"""
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            return None
        limit = min(limit, 100)
        entries: List[CoinTransactionEntry] = self.ledger_repo.list_for_user(
            user_id, kind=kind, limit=limit, offset=offset
        )
        total_count = self.ledger_repo.count_for_user(user_id, kind=kind)
        return CoinLedgerResponse(
            balance=user.total_coins,
            entries=entries,
            total_count=total_count,
            has_next=offset + limit < total_count,
        )

    def adjust_coins(self, request: CoinAdjustmentRequest, actor: str) -> CoinAdjustmentResponse:
        """
        관리자/서비스 코인 조정

        양수는 bonus, 음수는 penalty 로 기록한다. penalty 로 잔액이 음수가
        되면 InsufficientBalanceError 로 거부된다.
        """
        if request.amount == 0:
            raise ValidationError("Adjustment amount cannot be zero")
        kind = TransactionKind.BONUS if request.amount > 0 else TransactionKind.PENALTY

        try:
            entry = self.ledger.apply(
                request.user_id,
                request.amount,
                kind,
                ref_key=f"{kind.value}:{uuid.uuid4().hex}",
                description=f"{request.reason} (by {actor})",
            )
            user = self.user_repo.get_for_update(request.user_id)
            new_achievements = self.achievements.grant_earned(user)
            self.db.commit()

            logger.info(
                f"{kind.value} {request.amount:+d} coins for user {request.user_id} by {actor}"
            )
            return CoinAdjustmentResponse(
                transaction=CoinTransactionEntry.model_validate(entry),
                balance_after=entry.balance_after,
                new_achievements=new_achievements,
            )
        except BaseAPIException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Adjustment conflict for user {request.user_id}: {str(e)}")
            raise ConflictError("Adjustment conflicts with an existing transaction")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to adjust coins for user {request.user_id}: {str(e)}")
            raise InternalServerError("Failed to adjust coins")

    def verify_user_integrity(self, user_id: str) -> Optional[CoinIntegrityCheckResponse]:
        """
        원장 합계와 사용자 누적값 비교

        - sum(amount) == total_coins
        - sum(양수 amount) == coins_earned
        - sum(음수 amount 절대값) == coins_spent
        """
        user = self.user_repo.get_by_id(user_id)
        if user is None:
            return None
        sums = self.ledger_repo.sums_for_user(user_id)
        matches = (
            sums["balance"] == user.total_coins
            and sums["earned"] == user.coins_earned
            and sums["spent"] == user.coins_spent
            and user.total_coins == user.coins_earned - user.coins_spent
        )
        if not matches:
            logger.warning(f"Coin ledger mismatch detected for user {user_id}")

        return CoinIntegrityCheckResponse(
            status="OK" if matches else "MISMATCH",
            user_id=user_id,
            ledger_balance=sums["balance"],
            recorded_balance=user.total_coins,
            ledger_earned=sums["earned"],
            recorded_earned=user.coins_earned,
            ledger_spent=sums["spent"],
            recorded_spent=user.coins_spent,
            entry_count=sums["entries"],
            verified_at=datetime.now(timezone.utc),
        )

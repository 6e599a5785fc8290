"""
코인 원장 리포지토리

원장 행은 append 만 가능하다. 수정 요청은 ValidationError 로 거부된다.
"""

from typing import List, Optional

from sqlalchemy import case, desc, func
from sqlalchemy.orm import Session

from studyapi.core.exceptions import ValidationError
from studyapi.models.ledger import CoinTransaction as CoinTransactionModel, TransactionKind
from studyapi.schemas.coins import CoinTransactionEntry
from studyapi.repositories.base import BaseRepository


class LedgerRepository(BaseRepository[CoinTransactionModel, CoinTransactionEntry]):
    def __init__(self, db: Session):
        super().__init__(CoinTransactionModel, CoinTransactionEntry, db)

    def update(self, instance_id, **kwargs):
        """원장 항목은 수정할 수 없다. 정정은 반대 부호의 bonus/penalty 항목으로 기록한다."""
        raise ValidationError(
            "Ledger entries are immutable. Record a correcting bonus or penalty instead.",
            details={"transaction_id": instance_id},
        )

    def append(
        self,
        user_id: str,
        amount: int,
        kind: TransactionKind,
        description: str,
        ref_key: str,
        balance_after: int,
        resource_id: Optional[int] = None,
        download_id: Optional[int] = None,
    ) -> CoinTransactionModel:
        return self.add(
            user_id=user_id,
            amount=amount,
            kind=kind,
            description=description,
            ref_key=ref_key,
            balance_after=balance_after,
            resource_id=resource_id,
            download_id=download_id,
        )

    def exists_ref_key(self, ref_key: str) -> bool:
        return self.exists({"ref_key": ref_key})

    def list_for_user(
        self,
        user_id: str,
        kind: Optional[TransactionKind] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[CoinTransactionEntry]:
        """사용자 원장 조회 (최신순)"""
        query = self.db.query(self.model_class).filter(self.model_class.user_id == user_id)
        if kind is not None:
            query = query.filter(self.model_class.kind == kind)
        rows = query.order_by(desc(self.model_class.id)).offset(offset).limit(limit).all()
        return self._to_schemas(rows)

    def count_for_user(self, user_id: str, kind: Optional[TransactionKind] = None) -> int:
        filters = {"user_id": user_id}
        if kind is not None:
            filters["kind"] = kind
        return self.count(filters)

    def sums_for_user(self, user_id: str) -> dict:
        """정합성 검증용 합계: 전체, 양수 합, 음수 합(절대값), 건수"""
        row = (
            self.db.query(
                func.coalesce(func.sum(self.model_class.amount), 0),
                func.coalesce(
                    func.sum(case((self.model_class.amount > 0, self.model_class.amount), else_=0)),
                    0,
                ),
                func.coalesce(
                    func.sum(case((self.model_class.amount < 0, -self.model_class.amount), else_=0)),
                    0,
                ),
                func.count(self.model_class.id),
            )
            .filter(self.model_class.user_id == user_id)
            .one()
        )
        return {
            "balance": int(row[0]),
            "earned": int(row[1]),
            "spent": int(row[2]),
            "entries": int(row[3]),
        }

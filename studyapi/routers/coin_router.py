"""
코인 API 라우터

사용자용:
- GET /coins/balance: 내 잔액
- GET /coins/transactions: 내 거래 내역
- GET /coins/integrity/me: 내 원장 정합성 검증

관리자/서비스용:
- POST /coins/admin/adjust: bonus/penalty 지급 (X-Service-Key 또는 관리자 토큰)
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from studyapi.core.exceptions import NotFoundError
from studyapi.deps import (
    get_coin_service,
    get_current_active_user,
    require_admin_or_service_role,
)
from studyapi.models.ledger import TransactionKind
from studyapi.schemas.coins import (
    CoinAdjustmentRequest,
    CoinAdjustmentResponse,
    CoinBalanceResponse,
    CoinIntegrityCheckResponse,
    CoinLedgerResponse,
)
from studyapi.schemas.pagination import PaginationLimits
from studyapi.schemas.user import User
from studyapi.services.coin_service import CoinService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/coins", tags=["coins"])


@router.get("/balance", response_model=CoinBalanceResponse)
async def get_my_balance(
    current_user: User = Depends(get_current_active_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinBalanceResponse:
    balance = coin_service.get_balance(current_user.id)
    if balance is None:
        raise NotFoundError("Account not found")
    return balance


@router.get("/transactions", response_model=CoinLedgerResponse)
async def get_my_transactions(
    kind: Optional[TransactionKind] = Query(None, description="earned | spent | bonus | penalty"),
    limit: int = Query(
        PaginationLimits.COIN_TRANSACTIONS["default"],
        ge=PaginationLimits.COIN_TRANSACTIONS["min"],
        le=PaginationLimits.COIN_TRANSACTIONS["max"],
    ),
    offset: int = Query(0, ge=0),
    current_user: User = Depends(get_current_active_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinLedgerResponse:
    """내 코인 거래 내역 (최신순)"""
    ledger = coin_service.get_transactions(current_user.id, kind=kind, limit=limit, offset=offset)
    if ledger is None:
        raise NotFoundError("Account not found")
    return ledger


@router.get("/integrity/me", response_model=CoinIntegrityCheckResponse)
async def verify_my_integrity(
    current_user: User = Depends(get_current_active_user),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinIntegrityCheckResponse:
    result = coin_service.verify_user_integrity(current_user.id)
    if result is None:
        raise NotFoundError("Account not found")
    return result


# ============================================================================
# Admin / service role endpoints
# ============================================================================


@router.post("/admin/adjust", response_model=CoinAdjustmentResponse)
async def adjust_coins(
    request: CoinAdjustmentRequest,
    actor: str = Depends(require_admin_or_service_role),
    coin_service: CoinService = Depends(get_coin_service),
) -> CoinAdjustmentResponse:
    """
    코인 조정 - 양수는 bonus, 음수는 penalty

    HTTP Status:
        200: 조정 완료
        400: penalty 로 잔액이 음수가 되는 경우
        403: 서비스 키/관리자 권한 없음
        404: 대상 사용자 없음
    """
    logger.info(f"Coin adjustment requested by {actor} for user {request.user_id}")
    return coin_service.adjust_coins(request, actor=actor)

import logging
from typing import List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyapi.core.exceptions import (
    BaseAPIException,
    ConflictError,
    InsufficientBalanceError,
    InternalServerError,
    NotFoundError,
    ValidationError,
)
from studyapi.core.security import ServiceRole
from studyapi.models.ledger import TransactionKind
from studyapi.repositories.download_repository import DownloadRepository
from studyapi.repositories.resource_repository import ResourceRepository
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.download import Download, DownloadResult
from studyapi.services.achievement_service import AchievementService
from studyapi.services.ledger_service import LedgerUpdater

logger = logging.getLogger(__name__)


class DownloadService:
    """다운로드 정산 (settlement)"""

    def __init__(self, db: Session, role: ServiceRole):
        self.db = db
        self.user_repo = UserRepository(db)
        self.resource_repo = ResourceRepository(db)
        self.download_repo = DownloadRepository(db)
        self.ledger = LedgerUpdater(db, role)
        self.achievements = AchievementService(db)

    def download_resource(self, user_id: str, resource_id: int) -> DownloadResult:
        """
        자료 다운로드 정산

        사전 검증 (하나라도 실패하면 아무것도 변경하지 않음):
        - 사용자/자료 존재
        - 본인 자료가 아님
        - 이전 다운로드 기록 없음
        - 잔액 >= 가격

        이후 하나의 트랜잭션에서 다운로드 기록 생성, 가격 차감(spent),
        다운로더 downloaded_files_count 증가, 자료 download_count 증가,
        업적 평가를 수행한다. 동시 요청이 같은 쌍을 삽입하면
        (user_id, resource_id) 유니크 제약에 걸려 ConflictError 가 된다.
        """
        try:
            user = self.user_repo.get_for_update(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            resource = self.resource_repo.get_for_update(resource_id)
            if resource is None:
                raise NotFoundError(f"Resource {resource_id} not found")
            if resource.owner_id == user_id:
                raise ValidationError("You cannot download your own resource")
            if self.download_repo.get_for_pair(user_id, resource_id) is not None:
                raise ConflictError(
                    f"Resource {resource_id} was already downloaded",
                    details={"resource_id": resource_id},
                )

            price = resource.coin_price
            if user.total_coins < price:
                raise InsufficientBalanceError(
                    f"Insufficient balance. Required: {price}, Available: {user.total_coins}",
                    details={"required": price, "available": user.total_coins},
                )

            download = self.download_repo.add(
                user_id=user_id, resource_id=resource_id, coins_spent=price
            )
            self.ledger.apply_to(
                user,
                -price,
                TransactionKind.SPENT,
                ref_key=f"download:{download.id}",
                description=f"Download of '{resource.title}'",
                resource_id=resource_id,
                download_id=download.id,
            )
            user.downloaded_files_count = user.downloaded_files_count + 1
            resource.download_count = resource.download_count + 1
            self.db.flush()

            new_achievements = self.achievements.grant_earned(user)
            self.db.commit()

            logger.info(
                f"User {user_id} downloaded resource {resource_id} for {price} coins"
            )
            return DownloadResult(
                download=Download.model_validate(download),
                file_path=resource.file_path,
                coins_spent=price,
                balance_after=user.total_coins,
                new_achievements=new_achievements,
            )
        except BaseAPIException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(
                f"Duplicate download rejected for user {user_id}, resource {resource_id}: {str(e)}"
            )
            raise ConflictError(
                f"Resource {resource_id} was already downloaded",
                details={"resource_id": resource_id},
            )
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to settle download for user {user_id}: {str(e)}")
            raise InternalServerError("Failed to download resource")

    def list_user_downloads(self, user_id: str, limit: int = 20, offset: int = 0) -> List[Download]:
        return self.download_repo.list_for_user(user_id, limit=limit, offset=offset)

    def has_downloaded(self, user_id: str, resource_id: int) -> bool:
        return self.download_repo.get_for_pair(user_id, resource_id) is not None

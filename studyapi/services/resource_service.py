import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyapi.config import Settings
from studyapi.core.exceptions import (
    BaseAPIException,
    ConflictError,
    InternalServerError,
    NotFoundError,
    ValidationError,
)
from studyapi.core.security import ServiceRole
from studyapi.models.ledger import TransactionKind
from studyapi.repositories.resource_repository import ResourceRepository
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.pagination import DirectPaginatedResponse
from studyapi.schemas.resource import Resource, ResourceCreate, ResourceFilters, UploadResult
from studyapi.services.achievement_service import AchievementService
from studyapi.services.ledger_service import LedgerUpdater

logger = logging.getLogger(__name__)


class ResourceService:
    """학습 자료 업로드 및 조회"""

    def __init__(self, db: Session, settings: Settings, role: ServiceRole):
        self.db = db
        self.settings = settings
        self.resource_repo = ResourceRepository(db)
        self.user_repo = UserRepository(db)
        self.ledger = LedgerUpdater(db, role)
        self.achievements = AchievementService(db)

    def _validate_upload(self, payload: ResourceCreate) -> None:
        if payload.file_type not in self.settings.ALLOWED_FILE_TYPES:
            raise ValidationError(
                f"File type '{payload.file_type}' is not allowed",
                details={"allowed": self.settings.ALLOWED_FILE_TYPES},
            )
        if payload.file_size > self.settings.MAX_FILE_SIZE_BYTES:
            raise ValidationError(
                f"File exceeds the {self.settings.MAX_FILE_SIZE_BYTES} byte limit"
            )
        if payload.coin_price < 0:
            raise ValidationError("Coin price cannot be negative")
        if payload.coin_price > self.settings.MAX_COIN_PRICE:
            raise ValidationError(
                f"Coin price cannot exceed {self.settings.MAX_COIN_PRICE}"
            )

    def upload_resource(self, user_id: str, payload: ResourceCreate) -> UploadResult:
        """
        자료 업로드 + 업로드 보상

        하나의 트랜잭션에서:
        1. 자료 생성
        2. 업로더에게 UPLOAD_REWARD_COINS 적립 (earned, ref_key=upload:<resource_id>)
        3. uploaded_files_count 증가
        4. 업적 평가
        """
        self._validate_upload(payload)

        try:
            user = self.user_repo.get_for_update(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")
            if not user.is_active:
                raise ValidationError("Inactive accounts cannot upload resources")

            resource = self.resource_repo.add(
                owner_id=user_id,
                download_count=0,
                **payload.model_dump(),
            )

            reward = self.settings.UPLOAD_REWARD_COINS
            # 보상이 0 이면 원장 항목 없이 카운터만 올린다
            if reward > 0:
                self.ledger.apply_to(
                    user,
                    reward,
                    TransactionKind.EARNED,
                    ref_key=f"upload:{resource.id}",
                    description=f"Upload reward for '{resource.title}'",
                    resource_id=resource.id,
                )
            user.uploaded_files_count = user.uploaded_files_count + 1
            self.db.flush()

            new_achievements = self.achievements.grant_earned(user)
            self.db.commit()

            logger.info(
                f"User {user_id} uploaded resource {resource.id}, rewarded {reward} coins"
            )
            return UploadResult(
                resource=Resource.model_validate(resource),
                coins_awarded=reward,
                balance_after=user.total_coins,
                new_achievements=new_achievements,
            )
        except BaseAPIException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Upload conflict for user {user_id}: {str(e)}")
            raise ConflictError("Upload conflicts with existing data")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to upload resource for user {user_id}: {str(e)}")
            raise InternalServerError("Failed to upload resource")

    def get_resource(self, resource_id: int) -> Optional[Resource]:
        return self.resource_repo.get_by_id(resource_id)

    def list_resources(self, filters: ResourceFilters) -> DirectPaginatedResponse[Resource]:
        if filters.limit > self.settings.MAX_PAGE_SIZE:
            filters = filters.model_copy(update={"limit": self.settings.MAX_PAGE_SIZE})
        items, total_count = self.resource_repo.search(filters)
        return DirectPaginatedResponse[Resource](
            data=items,
            total_count=total_count,
            has_next=filters.offset + len(items) < total_count,
            limit=filters.limit,
            offset=filters.offset,
        )

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from studyapi.config import Settings
from studyapi.core.exceptions import BaseAPIException, ConflictError, InternalServerError
from studyapi.core.security import ServiceRole
from studyapi.models.ledger import TransactionKind
from studyapi.repositories.settings_repository import SettingsRepository
from studyapi.repositories.user_repository import UserRepository
from studyapi.schemas.user import Identity, PublicProfile, User, UserCreate, UserUpdate
from studyapi.services.achievement_service import AchievementService
from studyapi.services.ledger_service import LedgerUpdater

logger = logging.getLogger(__name__)


class UserService:
    """계정 생성 및 프로필 관리"""

    def __init__(self, db: Session, settings: Settings, role: ServiceRole):
        self.db = db
        self.settings = settings
        self.user_repo = UserRepository(db)
        self.settings_repo = SettingsRepository(db)
        self.ledger = LedgerUpdater(db, role)
        self.achievements = AchievementService(db)

    def create_account(self, identity: Identity, payload: UserCreate) -> User:
        """
        identity provider 가 인증한 사용자로 계정 생성

        기본 설정 행을 함께 만들고, 가입 보너스가 설정되어 있으면 bonus 원장
        항목으로 지급한다.
        """
        if self.user_repo.get_by_id(identity.user_id) is not None:
            raise ConflictError(f"Account {identity.user_id} already exists")
        if self.user_repo.get_by_email(identity.email) is not None:
            raise ConflictError(f"Email {identity.email} is already registered")
        if payload.username and self.user_repo.get_by_username(payload.username):
            raise ConflictError(f"Username {payload.username} is already taken")

        try:
            user = self.user_repo.create_account(
                user_id=identity.user_id,
                email=identity.email,
                full_name=payload.full_name,
                username=payload.username,
                university=payload.university,
                major=payload.major,
                year_of_study=payload.year_of_study,
            )
            self.settings_repo.create_defaults(user.id)

            if self.settings.SIGNUP_BONUS_COINS > 0:
                self.ledger.apply_to(
                    user,
                    self.settings.SIGNUP_BONUS_COINS,
                    TransactionKind.BONUS,
                    ref_key=f"signup:{user.id}",
                    description="Welcome bonus",
                )
                self.achievements.grant_earned(user)

            self.db.commit()
            logger.info(f"Created account {user.id} ({user.email})")
            return User.model_validate(user)
        except BaseAPIException:
            self.db.rollback()
            raise
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Account creation conflict for {identity.user_id}: {str(e)}")
            raise ConflictError("Account already exists")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to create account {identity.user_id}: {str(e)}")
            raise InternalServerError("Failed to create account")

    def get_profile(self, user_id: str) -> Optional[User]:
        return self.user_repo.get_by_id(user_id)

    def get_public_profile(self, user_id: str) -> Optional[PublicProfile]:
        user = self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            return None
        user_settings = self.settings_repo.get_for_user(user_id)
        if user_settings is not None and not user_settings.profile_public:
            return None
        return PublicProfile.model_validate(user.model_dump())

    def update_profile(self, user_id: str, update: UserUpdate) -> Optional[User]:
        """프로필 수정. 코인/카운터 필드는 수정 대상이 아니다."""
        changes = update.model_dump(exclude_unset=True)
        username = changes.get("username")
        if username:
            owner = self.user_repo.get_by_username(username)
            if owner is not None and owner.id != user_id:
                raise ConflictError(f"Username {username} is already taken")

        try:
            updated = self.user_repo.update(user_id, **changes)
            self.db.commit()
            return updated
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Profile update conflict for {user_id}: {str(e)}")
            raise ConflictError("Profile update conflicts with an existing account")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update profile {user_id}: {str(e)}")
            raise InternalServerError("Failed to update profile")

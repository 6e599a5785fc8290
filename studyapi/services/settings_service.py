import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studyapi.core.exceptions import InternalServerError
from studyapi.repositories.settings_repository import SettingsRepository
from studyapi.schemas.settings import UserSettings, UserSettingsUpdate

logger = logging.getLogger(__name__)


class SettingsService:
    def __init__(self, db: Session):
        self.db = db
        self.settings_repo = SettingsRepository(db)

    def get_settings(self, user_id: str) -> Optional[UserSettings]:
        return self.settings_repo.get_for_user(user_id)

    def update_settings(self, user_id: str, update: UserSettingsUpdate) -> Optional[UserSettings]:
        changes = update.model_dump(exclude_unset=True, exclude_none=True, mode="json")
        try:
            updated = self.settings_repo.update_for_user(user_id, **changes)
            self.db.commit()
            return updated
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Failed to update settings for user {user_id}: {str(e)}")
            raise InternalServerError("Failed to update settings")

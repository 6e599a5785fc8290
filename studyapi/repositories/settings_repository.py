from typing import Optional

from sqlalchemy.orm import Session

from studyapi.models.user_settings import UserSettings as UserSettingsModel
from studyapi.schemas.settings import UserSettings as UserSettingsSchema
from studyapi.repositories.base import BaseRepository


class SettingsRepository(BaseRepository[UserSettingsModel, UserSettingsSchema]):
    def __init__(self, db: Session):
        super().__init__(UserSettingsModel, UserSettingsSchema, db)

    def get_for_user(self, user_id: str) -> Optional[UserSettingsSchema]:
        return self.get_by_field("user_id", user_id)

    def create_defaults(self, user_id: str) -> UserSettingsModel:
        return self.add(user_id=user_id)

    def update_for_user(self, user_id: str, **kwargs) -> Optional[UserSettingsSchema]:
        instance = (
            self.db.query(self.model_class)
            .filter(self.model_class.user_id == user_id)
            .first()
        )
        if instance is None:
            return None
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        self.db.flush()
        self.db.refresh(instance)
        return self._to_schema(instance)

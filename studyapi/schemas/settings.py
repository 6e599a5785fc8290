from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class UserSettings(BaseModel):
    user_id: str
    email_notifications: bool = True
    push_notifications: bool = True
    theme: Theme = Theme.SYSTEM
    language: str = "en"
    profile_public: bool = True

    class Config:
        from_attributes = True


class UserSettingsUpdate(BaseModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    theme: Optional[Theme] = None
    language: Optional[str] = Field(None, min_length=2, max_length=10)
    profile_public: Optional[bool] = None

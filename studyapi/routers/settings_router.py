from fastapi import APIRouter, Depends

from studyapi.core.exceptions import NotFoundError
from studyapi.deps import get_current_active_user, get_settings_service
from studyapi.schemas.settings import UserSettings, UserSettingsUpdate
from studyapi.schemas.user import User
from studyapi.services.settings_service import SettingsService

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("", response_model=UserSettings)
async def get_my_settings(
    current_user: User = Depends(get_current_active_user),
    settings_service: SettingsService = Depends(get_settings_service),
) -> UserSettings:
    user_settings = settings_service.get_settings(current_user.id)
    if user_settings is None:
        raise NotFoundError("Settings not found")
    return user_settings


@router.patch("", response_model=UserSettings)
async def update_my_settings(
    update: UserSettingsUpdate,
    current_user: User = Depends(get_current_active_user),
    settings_service: SettingsService = Depends(get_settings_service),
) -> UserSettings:
    user_settings = settings_service.update_settings(current_user.id, update)
    if user_settings is None:
        raise NotFoundError("Settings not found")
    return user_settings

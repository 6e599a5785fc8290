# Repository layer - Data access with Pydantic responses

from .base import BaseRepository
from .user_repository import UserRepository
from .resource_repository import ResourceRepository
from .download_repository import DownloadRepository
from .ledger_repository import LedgerRepository
from .achievement_repository import AchievementRepository
from .settings_repository import SettingsRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ResourceRepository",
    "DownloadRepository",
    "LedgerRepository",
    "AchievementRepository",
    "SettingsRepository",
]

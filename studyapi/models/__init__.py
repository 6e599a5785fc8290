from .base import Base
from .user import User, UserRole
from .resource import Resource
from .download import Download
from .ledger import CoinTransaction, TransactionKind
from .achievement import Achievement, UserAchievement
from .user_settings import UserSettings

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Resource",
    "Download",
    "CoinTransaction",
    "TransactionKind",
    "Achievement",
    "UserAchievement",
    "UserSettings",
]

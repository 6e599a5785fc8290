from .user import User, Identity, UserCreate, UserUpdate
from .resource import Resource, ResourceCreate, ResourceFilters
from .download import Download, DownloadResult
from .coins import CoinTransactionEntry, CoinBalanceResponse
from .achievement import Achievement
from .settings import UserSettings

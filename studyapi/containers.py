from dependency_injector import containers, providers

from studyapi.config import Settings
from studyapi.core.security import ServiceRole
from studyapi.services.achievement_service import AchievementService
from studyapi.services.coin_service import CoinService
from studyapi.services.download_service import DownloadService
from studyapi.services.leaderboard_service import LeaderboardService
from studyapi.services.resource_service import ResourceService
from studyapi.services.settings_service import SettingsService
from studyapi.services.user_service import UserService


class ConfigModule(containers.DeclarativeContainer):
    """Application configuration."""

    config = providers.Singleton(Settings)


class ServiceModule(containers.DeclarativeContainer):
    """
    Service layer dependencies.

    The request-scoped session is supplied when the factory is called:
    ``container.services.download_service(db=db)``.
    """

    config = providers.DependenciesContainer()

    # 원장 쓰기 capability - 서버 내부에서만 생성
    service_role = providers.Singleton(ServiceRole.internal)

    user_service = providers.Factory(
        UserService, settings=config.config, role=service_role
    )
    resource_service = providers.Factory(
        ResourceService, settings=config.config, role=service_role
    )
    download_service = providers.Factory(DownloadService, role=service_role)
    coin_service = providers.Factory(CoinService, role=service_role)
    achievement_service = providers.Factory(AchievementService)
    leaderboard_service = providers.Factory(LeaderboardService, settings=config.config)
    settings_service = providers.Factory(SettingsService)


class Container(containers.DeclarativeContainer):
    """Application container."""

    config = providers.Container(ConfigModule)
    services = providers.Container(ServiceModule, config=config)


container = Container()

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file="studyapi/.env",
        env_file_encoding="utf-8",
        extra="allow",
    )
    # Application
    APP_NAME: str = "StudyShare API"
    PROJECT_NAME: str = "StudyShare API"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Database
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USERNAME: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DATABASE: str = "postgres"
    POSTGRES_SCHEMA: str = "public"

    # Full URL takes precedence over the POSTGRES_* parts (e.g. sqlite:// in tests)
    DATABASE_URL: Optional[str] = None
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    @property
    def database_url(self) -> str:
        """Construct database URL from individual components"""
        if self.DATABASE_URL:
            return self.DATABASE_URL

        # URL encode the password to handle special characters
        encoded_password = quote_plus(self.POSTGRES_PASSWORD)
        return f"postgresql+psycopg2://{self.POSTGRES_USERNAME}:{encoded_password}@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DATABASE}"

    # Identity provider tokens
    JWT_SECRET_KEY: str = "change-me"
    JWT_ALGORITHM: str = "HS256"
    JWT_AUDIENCE: Optional[str] = "authenticated"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Trusted internal callers (ledger writes, admin adjustments)
    SERVICE_ROLE_KEY: str = "change-me-service-role"

    # Business Rules
    UPLOAD_REWARD_COINS: int = Field(10, ge=0)  # credited once per uploaded resource, 0 disables
    SIGNUP_BONUS_COINS: int = 0
    MAX_COIN_PRICE: int = 1000
    MAX_FILE_SIZE_BYTES: int = 50 * 1024 * 1024
    ALLOWED_FILE_TYPES: List[str] = [
        "pdf",
        "doc",
        "docx",
        "ppt",
        "pptx",
        "xls",
        "xlsx",
        "txt",
        "md",
        "png",
        "jpg",
        "jpeg",
        "zip",
    ]

    # Pagination
    DEFAULT_PAGE_SIZE: int = 20
    MAX_PAGE_SIZE: int = 100
    LEADERBOARD_MAX_LIMIT: int = 100

    # CORS
    ALLOWED_ORIGINS: List[str] = ["*"]


settings = Settings()

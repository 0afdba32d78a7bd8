from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from app.common.enums import Environment


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    """

    # Application
    APP_NAME: str = "Blog API"
    APP_VERSION: str = "1.0.0"
    ENV: str = Environment.DEVELOPMENT.value
    DEBUG: bool = False
    TIMEZONE: str = "UTC"

    # Redis Configuration
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: Optional[str] = None
    REDIS_MAX_CONNECTIONS: int = 50
    REDIS_SOCKET_TIMEOUT: int = 5
    REDIS_SOCKET_CONNECT_TIMEOUT: int = 5
    REDIS_URL: Optional[str] = None

    # Response Cache Configuration
    CACHE_ENABLED: bool = True
    CACHE_DEFAULT_TTL: int = 300  # 5 minutes
    CACHE_SCAN_COUNT: int = 100
    CACHE_PATH_PREFIXES: list[str] = [
        "/api/posts",
        "/api/comments",
        "/api/categories",
    ]

    # Logging
    LOG_DIR: str = "./logs"
    LOG_TO_FILE: bool = True

    # CORS Configuration
    CORS_ORIGINS: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    CORS_ALLOW_CREDENTIALS: bool = True
    CORS_ALLOW_METHODS: list[str] = ["*"]
    CORS_ALLOW_HEADERS: list[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"
    )

    def __init__(self, **kwargs):
        """Initialize settings and auto-configure DEBUG based on ENV if not explicitly set."""
        super().__init__(**kwargs)

        if "DEBUG" not in kwargs:
            self.DEBUG = self.ENV == "dev"

    @property
    def redis_url(self) -> str:
        """Resolved Redis connection URL."""
        if self.REDIS_URL:
            return self.REDIS_URL
        auth_part = f":{self.REDIS_PASSWORD}@" if self.REDIS_PASSWORD else ""
        return f"redis://{auth_part}{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"


settings = Settings()

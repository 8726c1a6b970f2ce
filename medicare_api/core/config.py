from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List
from pydantic import field_validator


class Settings(BaseSettings):
    # Database (postgresql:// URLs are rewritten to the asyncpg driver)
    DATABASE_URL: str = "postgresql+asyncpg://localhost:5432/medicare_db"

    # JWT
    SECRET_KEY: str = ""
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Application
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    APP_NAME: str = "MediCare Admin API"
    APP_VERSION: str = "1.0.0"
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:5173,http://127.0.0.1:5173,http://127.0.0.1:3000"

    # Server Configuration
    HOST: str = "0.0.0.0"
    PORT: int = 5001
    WORKERS: int = 4

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"
    LOG_FILE: str = "logs/app.log"

    # Security
    PASSWORD_MIN_LENGTH: int = 8
    BCRYPT_ROUNDS: int = 12

    # Database Connection Pool
    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_TIMEOUT: int = 30
    DB_POOL_RECYCLE: int = 3600

    # Donor matching
    DEFAULT_DONOR_MATCH_LIMIT: int = 10
    MATCHING_MAX_CONCURRENT_READS: int = 8  # per-donor enrichment reads in flight

    # Listings
    DEFAULT_PAGE_SIZE: int = 10
    ACTIVITY_FEED_LIMIT: int = 20

    @field_validator('DEBUG', mode='before')
    @classmethod
    def parse_bool(cls, v):
        """Parse boolean from string."""
        if isinstance(v, str):
            return v.lower() in ("true", "1", "yes")
        return bool(v)

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._cors_origins_list = [item.strip() for item in self.CORS_ORIGINS.split(',') if item.strip()]

    @property
    def cors_origins_list(self) -> List[str]:
        """Get CORS_ORIGINS as a list."""
        return self._cors_origins_list

    @property
    def database_url_async(self) -> str:
        url = self.DATABASE_URL
        if url.startswith("postgresql://"):
            return url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()

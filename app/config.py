import logging
from typing import List, Optional
from pydantic import ValidationInfo, field_validator, model_validator, Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache

log = logging.getLogger(__name__)


class DatabaseSettings(BaseSettings):
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10
    DB_ECHO_LOG: bool = False


class SQLiteSettings(DatabaseSettings):
    SQLITE_URI: str = "./catalog.db"
    SQLITE_SYNC_PREFIX: str = "sqlite:///"
    SQLITE_ASYNC_PREFIX: str = "sqlite+aiosqlite:///"


class PostgresSettings(DatabaseSettings):
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "audio_catalog"
    POSTGRES_ASYNC_ENABLED: bool = False
    POSTGRES_SYNC_PREFIX: str = "postgresql://"
    POSTGRES_ASYNC_PREFIX: str = "postgresql+asyncpg://"


class S3Settings(BaseSettings):
    S3_CLOUDPROVIDER: str = "aws"
    S3_ENDPOINT: str = ""
    S3_ACCESSKEY: str = ""
    S3_SECRETKEY: str = ""
    S3_REGION: str = "us-east-1"
    S3_BUCKETNAME: str = ""
    S3_AUDIO_PREFIX: str = "audio"
    S3_LICENSE_PREFIX: str = "licenses"
    # Public base for object URLs, e.g. a CDN in front of the bucket
    S3_PUBLIC_BASE_URL: Optional[str] = None


class Settings(SQLiteSettings, PostgresSettings, S3Settings, BaseSettings):
    """Application configuration settings loaded from .env file and environment variables."""

    # --- Core Application Settings ---
    PROJECT_NAME: str = "audio-catalog"
    VERSION: str = "0.1.0"
    ENVIRONMENT: str = Field(default="development", pattern=r"^(development|testing|staging|production)$")
    API_PREFIX: str = "/api"

    DB_ENGINE: str = Field(default="postgres", pattern=r"^(postgres|sqlite)$")
    DATABASE_URL_OVERRIDE: Optional[str] = Field(default=None, validation_alias="DATABASE_URL")

    CORS_ORIGINS: str = ""
    CORS_ORIGINS_LIST: List[str] = Field(default=[], validate_default=True)

    CATALOG_API_URL: str = "http://localhost:8000/api"
    HTTP_CLIENT_TIMEOUT: float = 10.0

    @field_validator("ENVIRONMENT", "DB_ENGINE", mode="before")
    @classmethod
    def strip_comments(cls, v: str) -> str:
        if isinstance(v, str):
            return v.split("#")[0].strip()
        return v

    @field_validator("CORS_ORIGINS_LIST", mode="before")
    @classmethod
    def assemble_cors_origins(cls, v: List[str], info: ValidationInfo) -> List[str]:
        cors_origins_str = info.data.get("CORS_ORIGINS", "")
        log.debug(f"Raw CORS_ORIGINS input: {cors_origins_str!r}")
        if isinstance(cors_origins_str, str) and cors_origins_str:
            origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]
            valid_origins = []
            for origin in origins:
                if origin == "*" or origin.startswith("http://") or origin.startswith("https://"):
                    valid_origins.append(origin)
                else:
                    log.warning(f"Invalid CORS origin skipped: '{origin}'")
            return valid_origins
        return []

    @model_validator(mode="after")
    def set_db_echo_log(self) -> "Settings":
        if self.ENVIRONMENT == "development":
            self.DB_ECHO_LOG = True
        return self

    @computed_field  # type: ignore[prop-decorator]
    @property
    def DATABASE_URL(self) -> str:
        if self.DATABASE_URL_OVERRIDE:
            return self.DATABASE_URL_OVERRIDE
        if self.DB_ENGINE == "sqlite":
            return f"{self.SQLITE_SYNC_PREFIX}{self.SQLITE_URI}"
        credentials = f"{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
        location = f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        prefix = self.POSTGRES_ASYNC_PREFIX if self.POSTGRES_ASYNC_ENABLED else self.POSTGRES_SYNC_PREFIX
        return f"{prefix}{credentials}@{location}"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    log.info("Loading application settings...")
    settings = Settings()
    sensitive_keys = {"DATABASE_URL", "DATABASE_URL_OVERRIDE", "POSTGRES_PASSWORD", "S3_SECRETKEY"}
    log_data = settings.model_dump(exclude=sensitive_keys)
    log.debug(f"Settings loaded: {log_data}")
    return settings


settings = get_settings()

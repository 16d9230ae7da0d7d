"""Application configuration using pydantic settings with structured sections."""

from functools import lru_cache
from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ServerSettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False


class DatabaseSettings(BaseModel):
    url: str = "sqlite+aiosqlite:///./marketplace.db"
    echo: bool = False
    pool_size: Optional[int] = 20
    max_overflow: Optional[int] = 0
    # seconds a caller waits for a pooled connection before failing
    pool_timeout: float = 2.0
    pool_recycle: int = 1800
    command_timeout: float = 3.0
    slow_query_ms: int = 200
    auto_create: bool = True

    @property
    def is_sqlite(self) -> bool:
        return self.url.startswith("sqlite")


class SecuritySettings(BaseModel):
    secret_key: str = Field(default="change-me-please", min_length=8)
    algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    bcrypt_rounds: int = Field(default=10, ge=4, le=16)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "Administrator"


class CorsSettings(BaseModel):
    allow_origins: list[str] = Field(default_factory=lambda: ["http://localhost:3000"])
    allow_methods: list[str] = Field(default_factory=lambda: ["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    allow_headers: list[str] = Field(
        default_factory=lambda: ["Content-Type", "Authorization", "X-Requested-With"]
    )
    expose_headers: list[str] = Field(
        default_factory=lambda: ["Content-Length", "X-RateLimit-Limit", "X-RateLimit-Remaining"]
    )
    allow_credentials: bool = True
    max_age: int = 86400


class RateLimitSettings(BaseModel):
    enabled: bool = True
    api_limit: int = 100
    api_window_seconds: int = 15 * 60
    auth_limit: int = 5
    auth_window_seconds: int = 60 * 60
    auth_paths: list[str] = Field(default_factory=lambda: ["/user/login", "/user/register"])


class CacheSettings(BaseModel):
    ttl_seconds: int = 300
    max_entries: int = 1024


class StorageSettings(BaseModel):
    image_dir: Path = Field(default=Path("storage/images"))
    image_url_prefix: str = "/uploads"
    max_image_bytes: int = 5 * 1024 * 1024
    allowed_image_types: list[str] = Field(
        default_factory=lambda: ["image/jpeg", "image/png", "image/gif", "image/webp"]
    )


class LoggingSettings(BaseModel):
    level: str = "INFO"
    format: str = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class Settings(BaseSettings):
    """Top-level application settings with nested sections."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        case_sensitive=False,
    )

    environment: Literal["development", "staging", "production", "test"] = "development"
    debug: bool = False
    project_name: str = "Marketplace API"

    server: ServerSettings = ServerSettings()
    database: DatabaseSettings = DatabaseSettings()
    security: SecuritySettings = SecuritySettings()
    cors: CorsSettings = CorsSettings()
    rate_limit: RateLimitSettings = RateLimitSettings()
    cache: CacheSettings = CacheSettings()
    storage: StorageSettings = StorageSettings()
    logging: LoggingSettings = LoggingSettings()

    @property
    def database_url(self) -> str:
        return self.database.url

    @property
    def secret_key(self) -> str:
        return self.security.secret_key

    @property
    def algorithm(self) -> str:
        return self.security.algorithm

    @property
    def access_token_expire_minutes(self) -> int:
        return self.security.access_token_expire_minutes

    @property
    def expose_error_detail(self) -> bool:
        return self.debug and self.environment != "production"


@lru_cache()
def get_settings() -> Settings:
    return Settings()

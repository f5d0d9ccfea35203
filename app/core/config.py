"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from typing import List, Optional

from pydantic_settings import BaseSettings, SettingsConfigDict
from starlette.requests import Request


class Settings(BaseSettings):
    # Relational store. DATABASE_URL wins over the postgres_* parts when set.
    database_url: Optional[str] = None
    postgres_host: str = "localhost"
    postgres_port: int = 5432
    postgres_user: str = "jobboard"
    postgres_password: str = "password"
    postgres_db: str = "jobboard"

    # Connection pool: fixed limit, callers wait for a free connection
    db_pool_size: int = 10
    db_pool_timeout: float = 30

    # JWT Auth. 0 minutes issues tokens without an exp claim.
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60

    # Resume storage backend: "s3" or "gridfs"
    resume_storage: str = "s3"
    max_resume_size_mb: int = 5

    # S3
    aws_region: str = "us-east-1"
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None
    s3_bucket_name: str = ""

    # MongoDB (GridFS resume storage)
    mongodb_uri: str = "mongodb://localhost:27017"
    mongodb_db: str = "jobboard"

    # App
    cors_origins: str = "*"
    log_level: str = "INFO"
    log_format: str = "json"
    port: int = 5002
    debug: bool = False

    @property
    def sqlalchemy_url(self) -> str:
        """Construct the SQLAlchemy connection URL"""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.postgres_user}:{self.postgres_password}"
            f"@{self.postgres_host}:{self.postgres_port}/{self.postgres_db}"
        )

    @property
    def cors_origin_list(self) -> List[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


def get_app_settings(request: Request) -> Settings:
    """Dependency - the Settings the running app was built with."""
    return request.app.state.settings

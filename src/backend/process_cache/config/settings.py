"""
Application settings.

Settings are read from the environment (and an optional ``.env`` file) using
pydantic-settings. Database URIs are assembled from their components unless
given explicitly.
"""
import socket
from functools import lru_cache
from typing import Optional

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings for the process cache."""

    # Database
    DATABASE_TYPE: str = "sqlite"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "process_cache"
    SQLITE_DB_PATH: str = "./process_cache.db"
    DATABASE_URI: Optional[str] = None
    DB_ECHO: bool = False

    # Identity of the executing host, used to scope logs and cache entries
    MACHINE_NAME: str = socket.gethostname()

    # Logging
    LOG_DIR: Optional[str] = None
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("DATABASE_TYPE", mode="before")
    @classmethod
    def lower_database_type(cls, v: str) -> str:
        if isinstance(v, str):
            return v.lower()
        return v

    @model_validator(mode="after")
    def assemble_database_uri(self) -> "Settings":
        if self.DATABASE_URI:
            return self

        if self.DATABASE_TYPE == "sqlite":
            self.DATABASE_URI = f"sqlite+aiosqlite:///{self.SQLITE_DB_PATH}"
        elif self.DATABASE_TYPE == "postgres":
            self.DATABASE_URI = (
                f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
                f"@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
            )
        else:
            raise ValueError(f"Unsupported DATABASE_TYPE: {self.DATABASE_TYPE}")
        return self


@lru_cache()
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()


settings = get_settings()

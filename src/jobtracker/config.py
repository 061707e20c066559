from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url

load_dotenv()

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_FALLBACK_DATA = PACKAGE_DIR / "web" / "static" / "data.json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "Job Tracker"
    app_env: str = "development"
    app_host: str = "127.0.0.1"
    app_port: int = Field(default=3000, validation_alias=AliasChoices("app_port", "port"))
    log_level: str = "INFO"
    cors_origins: str = "http://127.0.0.1:3000"

    store_backend: Literal["sql", "firestore"] = "sql"

    database_url: str = ""
    db_driver: str = "postgresql+psycopg"
    db_host: str = "localhost"
    db_port: int = 5432
    db_user: str = ""
    db_password: str = ""
    db_database: str = "jobtracker"
    db_instance_socket: str = ""
    db_pool_size: int = 5
    db_pool_timeout_sec: int = 30

    firestore_project: str = ""
    firestore_collection: str = "jobs"

    api_collections: str = "applications,jobs"
    strict_status: bool = True

    api_base_url: str = "http://127.0.0.1:3000"
    api_timeout_sec: int = 10
    fallback_data_path: Path = DEFAULT_FALLBACK_DATA

    @field_validator("app_env")
    @classmethod
    def validate_env(cls, value: str) -> str:
        allowed = {"development", "staging", "production", "test"}
        if value not in allowed:
            raise ValueError(f"app_env must be one of {sorted(allowed)}")
        return value

    @field_validator("db_pool_size")
    @classmethod
    def validate_pool_size(cls, value: int) -> int:
        if value < 1:
            raise ValueError("db_pool_size must be at least 1")
        return value

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def cors_origin_list(self) -> list[str]:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def api_collection_list(self) -> list[str]:
        return [name.strip().strip("/") for name in self.api_collections.split(",") if name.strip()]

    @property
    def sqlalchemy_url(self) -> URL:
        """Connection URL for the row store.

        An explicit ``database_url`` always wins. In production a managed
        database is reached through its instance socket directory when one is
        configured; every other case connects over host and port.
        """
        if self.database_url:
            return make_url(self.database_url)

        if self.is_production and self.db_instance_socket:
            return URL.create(
                self.db_driver,
                username=self.db_user or None,
                password=self.db_password or None,
                database=self.db_database,
                query={"host": self.db_instance_socket},
            )

        return URL.create(
            self.db_driver,
            username=self.db_user or None,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_database,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()

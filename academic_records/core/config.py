from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    app_name: str = Field("Academic Records API", alias="APP_NAME")
    environment: str = Field("development", alias="ENVIRONMENT")

    database_url: str = Field("sqlite+aiosqlite:///./academic_records.db", alias="DATABASE_URL")
    sql_echo: bool = Field(False, alias="SQL_ECHO")
    create_tables_on_startup: bool = Field(True, alias="CREATE_TABLES_ON_STARTUP")

    log_level: str = Field("INFO", alias="LOG_LEVEL")
    log_format: str = Field("", alias="LOG_FORMAT")  # "console" or "json"; empty picks by environment

    cors_allow_origins: List[str] = Field(["*"], alias="CORS_ALLOW_ORIGINS")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def is_development(self) -> bool:
        return self.environment.lower() in ("development", "dev", "local", "test")

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()

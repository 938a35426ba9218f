# app/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from typing import Optional
from urllib.parse import quote_plus


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DB_USER: str = "root"
    MYSQL_ROOT_PASSWORD: str = ""
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_SCHEMA: str = "peter_parker"
    DATABASE_URL: Optional[str] = None     # Full SQLAlchemy URL, overrides the DB_* fields

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        # No default database in the URL: the schema is checked and selected per connection
        return (
            f"mysql+pymysql://{self.DB_USER}:{quote_plus(self.MYSQL_ROOT_PASSWORD)}"
            f"@{self.DB_HOST}:{self.DB_PORT}/"
        )

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = ""                    # Unset or invalid → DEBUG, with a warning

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()

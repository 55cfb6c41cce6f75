"""
recipeshare.config
==================

Settings for the service, resolved once from the environment.

A `.env` file in the working directory is loaded first if present; real
environment variables take precedence over it. Everything else in the
package reads configuration through `get_settings()`.
"""

from dataclasses import dataclass, field
from functools import lru_cache
import os
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _as_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class Settings:
    """
    Resolved configuration values.

    Attributes
    ----------
    database_url:
        SQLAlchemy URL of the recipes database.
    environment:
        Deployment name. ``testing`` disables table creation and seeding at
        startup so tests can provide their own database.
    log_level:
        Name of the root logging level.
    cors_origins:
        Origins allowed by the CORS middleware.
    seed_on_startup:
        Insert the sample recipes when the table is empty.
    sql_echo:
        Echo SQL statements through the ``sqlalchemy.engine`` logger.
    host, port:
        Bind address used by ``recipeshare.main``.
    """

    database_url: str = "sqlite:///./recipeshare.db"
    environment: str = "local"
    log_level: str = "INFO"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    seed_on_startup: bool = True
    sql_echo: bool = False
    host: str = "127.0.0.1"
    port: int = 8000

    @property
    def is_testing(self) -> bool:
        return self.environment.lower() == "testing"


@lru_cache
def get_settings() -> Settings:
    """Return the cached `Settings` built from environment variables."""
    origins = os.getenv("CORS_ORIGINS", "*")
    return Settings(
        database_url=os.getenv("DATABASE_URL", "sqlite:///./recipeshare.db"),
        environment=os.getenv("ENVIRONMENT", "local"),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=[o.strip() for o in origins.split(",") if o.strip()],
        seed_on_startup=_as_bool(os.getenv("SEED_ON_STARTUP", "true")),
        sql_echo=_as_bool(os.getenv("SQL_ECHO", "false")),
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8000")),
    )

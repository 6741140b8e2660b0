"""
Configuration helpers for the potluck backend.

Settings are read from the environment once and then handed explicitly to the
app factory, so routers/services never fetch os.environ directly.
"""

from dataclasses import dataclass
from functools import lru_cache
import os

DEFAULT_ADMIN_PASSWORD = "admin"


@dataclass(frozen=True)
class Settings:
    """Typed view of environment variables."""

    app_env: str
    database_url: str
    data_file: str
    admin_password: str
    static_dir: str
    log_level: str
    host: str
    port: int

    @property
    def is_production(self) -> bool:
        return self.app_env in {"prod", "production"}

    @property
    def uses_default_admin_password(self) -> bool:
        return self.admin_password == DEFAULT_ADMIN_PASSWORD


def normalize_database_url(url: str | None) -> str:
    """Hosted Postgres providers hand out postgres:// URLs; SQLAlchemy wants postgresql://."""
    value = (url or "").strip()
    if value.startswith("postgres://"):
        value = "postgresql://" + value[len("postgres://") :]
    return value


@lru_cache
def get_settings() -> Settings:
    """Read the current environment and build a Settings instance."""
    def _int(value: str, default: int = 0) -> int:
        try:
            return int(value)
        except (TypeError, ValueError):
            return default

    return Settings(
        app_env=(os.getenv("APP_ENV") or "dev").strip().lower(),
        database_url=normalize_database_url(os.getenv("POSTGRES_URL") or os.getenv("DATABASE_URL")),
        data_file=os.getenv("POTLUCK_DATA_FILE", "potluck.json"),
        admin_password=os.getenv("ADMIN_PASSWORD") or DEFAULT_ADMIN_PASSWORD,
        static_dir=os.getenv("STATIC_DIR", "dist"),
        log_level=(os.getenv("LOG_LEVEL") or "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=_int(os.getenv("PORT", "3000"), 3000),
    )

# app/config.py
"""
Runtime configuration, read from environment variables.

A local .env file is loaded first; variables already present in the
environment take precedence over it.
"""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv
from sqlalchemy.engine import URL

load_dotenv(override=False)

DEFAULT_DB_NAME = "pd_steven_marimon_caiman"


@dataclass(frozen=True)
class Settings:
    db_host: str = "localhost"
    db_port: int = 3306
    db_user: str = "root"
    db_password: str = ""
    db_name: str = DEFAULT_DB_NAME
    db_pool_size: int = 10
    # seconds to wait for a free pooled connection; None waits indefinitely
    db_pool_timeout: Optional[int] = None
    database_url_override: Optional[str] = None

    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: str = "public"
    seed_data_dir: str = "data"
    max_body_bytes: int = 10 * 1024 * 1024
    log_level: str = "INFO"

    @property
    def database_url(self) -> str:
        if self.database_url_override:
            return self.database_url_override
        url = URL.create(
            "mysql+pymysql",
            username=self.db_user,
            password=self.db_password or None,
            host=self.db_host,
            port=self.db_port,
            database=self.db_name,
        )
        return url.render_as_string(hide_password=False)


def _getenv(name: str, default: str = "") -> str:
    return (os.environ.get(name) or default).strip()


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name)
    try:
        return int(raw)
    except ValueError:
        return default


def _getenv_optional_int(name: str) -> Optional[int]:
    raw = _getenv(name)
    try:
        return int(raw)
    except ValueError:
        return None


def load_settings() -> Settings:
    return Settings(
        db_host=_getenv("DB_HOST", "localhost"),
        db_port=_getenv_int("DB_PORT", 3306),
        db_user=_getenv("DB_USER", "root"),
        db_password=os.environ.get("DB_PASSWORD", ""),
        db_name=_getenv("DB_NAME", DEFAULT_DB_NAME),
        db_pool_size=_getenv_int("DB_POOL_SIZE", 10),
        db_pool_timeout=_getenv_optional_int("DB_POOL_TIMEOUT"),
        database_url_override=_getenv("DATABASE_URL") or None,
        host=_getenv("HOST", "0.0.0.0"),
        port=_getenv_int("PORT", 3000),
        static_dir=_getenv("STATIC_DIR", "public"),
        seed_data_dir=_getenv("SEED_DATA_DIR", "data"),
        max_body_bytes=_getenv_int("MAX_BODY_BYTES", 10 * 1024 * 1024),
        log_level=_getenv("LOG_LEVEL", "INFO").upper(),
    )

"""Runtime configuration, logging setup and backend selection.

Values come from the environment (a ``.env`` file in the working directory
is loaded first):

    POMOFLOW_HOME        data directory (settings.json, local database)
    POMOFLOW_DB_URL      SQLAlchemy URL for the local backend
    POMOFLOW_LOG_LEVEL   DEBUG / INFO / WARNING / ...
    SUPABASE_URL         hosted backend URL  } both set → hosted backend
    SUPABASE_ANON_KEY    hosted backend key  }
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".pomoflow"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass(frozen=True)
class AppConfig:
    home: Path = DEFAULT_HOME
    db_url: str | None = None
    supabase_url: str | None = None
    supabase_key: str | None = None
    log_level: str = "INFO"

    @property
    def settings_path(self) -> Path:
        return self.home / "settings.json"

    @property
    def database_url(self) -> str:
        return self.db_url or f"sqlite:///{self.home / 'pomoflow.db'}"

    @property
    def uses_supabase(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "AppConfig":
        if dotenv:
            load_dotenv(dotenv_path=".env")
        home = os.getenv("POMOFLOW_HOME")
        return cls(
            home=Path(home).expanduser() if home else DEFAULT_HOME,
            db_url=os.getenv("POMOFLOW_DB_URL") or None,
            supabase_url=os.getenv("SUPABASE_URL") or None,
            supabase_key=os.getenv("SUPABASE_ANON_KEY") or None,
            log_level=os.getenv("POMOFLOW_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the whole app."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        force=True,
    )


def build_services(config: AppConfig):
    """Return ``(auth, store)`` for the configured backend.

    The hosted backend is used when both Supabase variables are present;
    otherwise everything lives in the local SQLite database.
    """
    if config.uses_supabase:
        from supabase import create_client

        from .auth import SupabaseAuthService
        from .sessions.remote import SupabaseSessionStore

        logger.info("Using hosted backend at %s", config.supabase_url)
        client = create_client(config.supabase_url, config.supabase_key)
        return SupabaseAuthService(client), SupabaseSessionStore(client)

    from .auth import LocalAuthService
    from .database.db import configure_engine, init_db
    from .sessions.store import SqlSessionStore

    config.home.mkdir(parents=True, exist_ok=True)
    configure_engine(config.database_url)
    init_db()
    logger.info("Using local database %s", config.database_url)
    return LocalAuthService(), SqlSessionStore()

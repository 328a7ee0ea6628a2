"""SQLAlchemy engine and session handling for the local backend."""

from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session as OrmSession
from sqlalchemy.pool import StaticPool

from ..config import DEFAULT_HOME
from .models import Base

DEFAULT_DB_URL = f"sqlite:///{DEFAULT_HOME / 'pomoflow.db'}"
_MEMORY_URLS = ("sqlite://", "sqlite:///:memory:")

# ── module state (built on first use) ─────────────────────────────────────

_engine: Engine | None = None
_SessionFactory: sessionmaker | None = None


def _build_engine(url: str) -> Engine:
    if not url.startswith("sqlite"):
        return create_engine(url, pool_pre_ping=True)
    kwargs = {"connect_args": {"check_same_thread": False}}
    if url in _MEMORY_URLS:
        # every checkout must see the same in-memory database
        kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


def _current_engine() -> Engine:
    global _engine
    if _engine is None:
        DEFAULT_HOME.mkdir(parents=True, exist_ok=True)
        _engine = _build_engine(DEFAULT_DB_URL)
    return _engine


def _session_factory() -> sessionmaker:
    global _SessionFactory
    if _SessionFactory is None:
        _SessionFactory = sessionmaker(bind=_current_engine(), expire_on_commit=False)
    return _SessionFactory


# ── public API ────────────────────────────────────────────────────────────


def configure_engine(url: str) -> None:
    """Point the local backend at ``url``.

    Replaces (and disposes) any engine built earlier.  Tests pass
    ``sqlite:///:memory:`` to get a fresh database.
    """
    global _engine, _SessionFactory
    if _engine is not None:
        _engine.dispose()
    _engine = _build_engine(url)
    _SessionFactory = None


def init_db() -> None:
    """Create the ``users`` and ``timer_sessions`` tables if missing."""
    Base.metadata.create_all(_current_engine())


@contextmanager
def get_session():
    """Yield a SQLAlchemy session; commit on success, rollback on error."""
    session: OrmSession = _session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()

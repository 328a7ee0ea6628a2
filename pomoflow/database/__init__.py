"""Database package."""

from .db import configure_engine, get_session, init_db
from .models import TimerSessionRow, User

__all__ = ["configure_engine", "get_session", "init_db", "TimerSessionRow", "User"]

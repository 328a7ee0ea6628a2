"""SQLAlchemy ORM models for PomoFlow's local backend."""

from datetime import datetime, timezone

from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey
from sqlalchemy.orm import DeclarativeBase


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Base(DeclarativeBase):
    pass


class User(Base):
    """A locally registered account."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(320), nullable=False, unique=True)
    password_hash = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    def __repr__(self) -> str:
        return f"<User id={self.id} email={self.email}>"


class TimerSessionRow(Base):
    """One pomodoro attempt.  Break countdowns are never stored."""

    __tablename__ = "timer_sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False, default="Pomodoro Session")
    duration_seconds = Column(Integer, nullable=False)
    started_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    completed = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<TimerSessionRow id={self.id} user={self.user_id} "
            f"completed={self.completed}>"
        )

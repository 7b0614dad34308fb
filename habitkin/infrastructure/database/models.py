"""SQLAlchemy ORM models -- PostgreSQL schema definition."""
import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column, String, Integer, Boolean, DateTime, Text, SmallInteger, ForeignKey,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY
from sqlalchemy.orm import DeclarativeBase


def _utcnow():
    return datetime.now(timezone.utc)


def _new_uuid():
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class Base(DeclarativeBase):
    pass


# ---------------------------------------------------------------------------
# Profiles (one row per user, avatar recipe as a JSON blob)
# ---------------------------------------------------------------------------

class ProfileModel(Base):
    __tablename__ = "profiles"

    # Identity comes from the hosted auth backend; no local users table.
    user_id = Column(UUID(as_uuid=False), primary_key=True)
    avatar = Column(JSONB, nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)


# ---------------------------------------------------------------------------
# Tasks and completions
# ---------------------------------------------------------------------------

class TaskModel(Base):
    __tablename__ = "tasks"

    id = Column(UUID(as_uuid=False), primary_key=True, default=_new_uuid)
    user_id = Column(UUID(as_uuid=False), nullable=False, index=True)
    title = Column(String(120), nullable=False)
    type = Column(String(10), nullable=False, default="habit")
    freq_times = Column(Integer, nullable=True)
    freq_per = Column(String(10), nullable=True)
    # 0=Sun..6=Sat; NULL means every day
    scheduled_days = Column(ARRAY(SmallInteger), nullable=True)
    archived = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class CompletionModel(Base):
    __tablename__ = "completions"

    id = Column(UUID(as_uuid=False), primary_key=True, default=_new_uuid)
    user_id = Column(UUID(as_uuid=False), nullable=False, index=True)
    task_id = Column(UUID(as_uuid=False), ForeignKey("tasks.id"), nullable=False, index=True)
    proof_type = Column(String(10), nullable=False)
    proof_note = Column(Text, nullable=True)
    photo_path = Column(Text, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

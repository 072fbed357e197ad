"""
SQLAlchemy ORM Models for the task manager.

Two tables:
- users: registered accounts (credential store)
- tasks: tasks owned by exactly one user (task store)

Architecture:
- Primary Keys: UUID strings (globally unique, portable across SQLite/PostgreSQL)
- Ownership: tasks.user_id references users.user_id with cascade delete
- Enumerations: priority and status guarded by check constraints
"""

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy import (
    Column, String, Date, DateTime, Text, ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import declarative_base, relationship


Base = declarative_base()


def _new_id() -> str:
    return str(uuid4())


def utc_now() -> datetime:
    """Current UTC time as a naive datetime; timestamp columns carry no zone."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class UserRecord(Base):
    """Registered user. Email is stored trimmed and lowercased."""
    __tablename__ = "users"

    user_id = Column(String(36), primary_key=True, default=_new_id)
    username = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False, comment="bcrypt hash")

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    tasks = relationship("TaskRecord", back_populates="owner", cascade="all, delete-orphan")

    __table_args__ = (
        CheckConstraint("length(username) >= 3", name="ck_user_username_length"),
    )

    def __repr__(self):
        return f"<UserRecord(id={self.user_id}, email={self.email})>"


class TaskRecord(Base):
    """A single task. Every query against this table is scoped by user_id."""
    __tablename__ = "tasks"

    task_id = Column(String(36), primary_key=True, default=_new_id)
    user_id = Column(
        String(36),
        ForeignKey("users.user_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    due_date = Column(Date, nullable=False)
    priority = Column(String(10), nullable=False, default="medium")
    status = Column(String(20), nullable=False, default="pending")
    category = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now)

    owner = relationship("UserRecord", back_populates="tasks")

    __table_args__ = (
        Index("ix_task_user_created", "user_id", "created_at"),
        CheckConstraint("priority IN ('low', 'medium', 'high')", name="ck_task_priority"),
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')",
            name="ck_task_status",
        ),
    )

    def __repr__(self):
        return f"<TaskRecord(id={self.task_id}, user={self.user_id}, status={self.status})>"

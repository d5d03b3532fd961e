"""
Database models and session management for POS Reviews API.

Tables for POS, users and their reviews. SQLite connections get
foreign key enforcement switched on when they are opened.
"""

from datetime import datetime, UTC
from typing import Optional

from sqlalchemy import (
    Integer, String, Text, DateTime, Boolean, ForeignKey,
    Index, UniqueConstraint, CheckConstraint, create_engine, event
)
from sqlalchemy.orm import (
    DeclarativeBase, sessionmaker, Mapped, mapped_column
)

from pos_reviews.config import get_settings


# =============================================================================
# Database Setup
# =============================================================================


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def enable_sqlite_foreign_keys(engine):
    """Turn on foreign key checks for every new SQLite connection of `engine`."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _set_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_engine():
    """Create database engine."""
    settings = get_settings()
    engine = create_engine(
        settings.database_url,
        connect_args={"check_same_thread": False} if "sqlite" in settings.database_url else {},
        echo=settings.debug
    )
    enable_sqlite_foreign_keys(engine)
    return engine


engine = get_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """Dependency to get database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """Initialize database tables."""
    Base.metadata.create_all(bind=engine)


# =============================================================================
# Database Models
# =============================================================================


class Pos(Base):
    """A point of sale that users can review."""

    __tablename__ = "pos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )


class User(Base):
    """A user who writes and approves reviews."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    login_name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )


class Review(Base):
    """
    A user's review of a POS.

    approval_count and approved are owned by the workflow: approved is
    recomputed from approval_count on every approval and never set directly.
    """

    __tablename__ = "reviews"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    pos_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("pos.id", ondelete="CASCADE"), index=True, nullable=False
    )
    author_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False
    )

    text: Mapped[str] = mapped_column(Text, nullable=False)

    approval_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    approved: Mapped[bool] = mapped_column(Boolean, default=False, index=True, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=lambda: datetime.now(UTC), onupdate=lambda: datetime.now(UTC)
    )

    __table_args__ = (
        # Each user can only review a POS once
        UniqueConstraint('pos_id', 'author_id', name='uq_review_pos_author'),
        CheckConstraint('approval_count >= 0', name='ck_review_approval_count'),
        Index('ix_reviews_pos_approved', 'pos_id', 'approved'),
    )

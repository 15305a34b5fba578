"""Profile ORM — the aggregate root every other entity is scoped by.

Invariants:
    - id is an autoincrement integer; lowest surviving id wins promotion on delete
    - At most one row has is_active = true (partial unique index)
    - name is non-empty, stripped text

Design Decisions:
    - Scoped tables cascade on profile delete at the storage level; ProfileManager
      still deletes them explicitly inside the same transaction
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Boolean, DateTime, Index, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wmstore.db.base import Base


class Profile(Base):
    """Named, isolated namespace for one user's optimizer state."""
    __tablename__ = "profiles"
    __table_args__ = (
        Index(
            "uq_profiles_single_active", "is_active", unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    # Relationships
    general: Mapped[Optional["GeneralSettings"]] = relationship(
        "GeneralSettings", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True, uselist=False,
    )
    machines: Mapped[list["Machine"]] = relationship(
        "Machine", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    heroes: Mapped[list["Hero"]] = relationship(
        "Hero", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    artifacts: Mapped[list["Artifact"]] = relationship(
        "Artifact", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    results: Mapped[list["OptimizationResult"]] = relationship(
        "OptimizationResult", back_populates="profile",
        cascade="all, delete-orphan", passive_deletes=True,
    )

"""OptimizationResult ORM — last computed optimizer output per profile and mode.

Invariants:
    - At most one row per (profile_id, mode) (unique constraint)
    - result is an opaque JSON payload, stored and returned as-is

Design Decisions:
    - Cache slot, not history: EntityRepository deletes then inserts in one transaction
"""

from datetime import datetime, timezone
from typing import Any

from sqlalchemy import DateTime, ForeignKey, Integer, String, JSON, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wmstore.db.base import Base


class OptimizationResult(Base):
    """Cached optimizer result."""
    __tablename__ = "optimization_results"
    __table_args__ = (
        UniqueConstraint("profile_id", "mode", name="uq_results_profile_mode"),
    )

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False,
    )
    mode: Mapped[str] = mapped_column(String(20), nullable=False)
    result: Mapped[Any] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="results",
    )

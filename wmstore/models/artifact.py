"""Artifact ORM — owned artifact counts per tier for one stat within a profile.

Invariants:
    - Keyed by (profile_id, stat); stat is one of ARTIFACT_STATS
    - tier_counts stores every known tier (string keys, JSON object)
"""

from sqlalchemy import ForeignKey, Integer, String, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wmstore.db.base import Base
from wmstore.core.normalize_records import tiers_from_storage


class Artifact(Base):
    """Per-profile, per-stat artifact tier counts."""
    __tablename__ = "artifacts"

    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True,
    )
    stat: Mapped[str] = mapped_column(String(20), primary_key=True)
    tier_counts: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="artifacts",
    )

    def tiers(self) -> dict[int, int]:
        return tiers_from_storage(self.tier_counts)

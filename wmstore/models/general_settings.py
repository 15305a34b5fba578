"""GeneralSettings ORM — one row of account-wide levels per profile.

Invariants:
    - profile_id is both PK and FK: exactly one row per profile
    - engineer_level and scarab_level are non-negative ints (coerced before write)
"""

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wmstore.db.base import Base
from wmstore.core.schema_constants import DEFAULT_RIFT_RANK


class GeneralSettings(Base):
    """Engineer level, scarab level and rift rank for a profile."""
    __tablename__ = "general_settings"

    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True,
    )
    engineer_level: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    scarab_level: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    rift_rank: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_RIFT_RANK,
    )

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="general",
    )

    def to_dict(self) -> dict:
        return {
            "engineerLevel": self.engineer_level,
            "scarabLevel": self.scarab_level,
            "riftRank": self.rift_rank,
        }

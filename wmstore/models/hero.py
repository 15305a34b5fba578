"""Hero ORM — crew bonus percentages of one catalog hero within a profile.

Invariants:
    - Keyed by (profile_id, key); key is the JSON encoding of the catalog id
    - Percentages are ints in 0..20
"""

from typing import Any

from sqlalchemy import ForeignKey, Integer, String, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wmstore.db.base import Base


class Hero(Base):
    """Per-profile hero record."""
    __tablename__ = "heroes"

    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True,
    )
    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    catalog_id: Mapped[Any] = mapped_column(JSON, nullable=False)
    damage_pct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    health_pct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    armor_pct: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="heroes",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.catalog_id,
            "percentages": {
                "damage": self.damage_pct,
                "health": self.health_pct,
                "armor": self.armor_pct,
            },
        }

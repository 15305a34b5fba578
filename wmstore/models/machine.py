"""Machine ORM — mutable upgrade state of one catalog machine within a profile.

Invariants:
    - Keyed by (profile_id, key); key is the JSON encoding of the catalog id
    - catalog_id keeps the raw JSON value (int or str) for export
    - All numeric columns are non-negative ints

Design Decisions:
    - Blueprints flattened into three columns: fixed shape, queryable
"""

from typing import Any

from sqlalchemy import ForeignKey, Integer, String, JSON
from sqlalchemy.orm import Mapped, mapped_column, relationship

from wmstore.db.base import Base


class Machine(Base):
    """Per-profile machine record. Identity comes from the game catalog."""
    __tablename__ = "machines"

    profile_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("profiles.id", ondelete="CASCADE"), primary_key=True,
    )
    key: Mapped[str] = mapped_column(String(200), primary_key=True)
    catalog_id: Mapped[Any] = mapped_column(JSON, nullable=False)
    rarity: Mapped[str] = mapped_column(String(40), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    blueprint_damage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    blueprint_health: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    blueprint_armor: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    inscription_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sacred_level: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    profile: Mapped["Profile"] = relationship(
        "Profile", back_populates="machines",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.catalog_id,
            "rarity": self.rarity,
            "level": self.level,
            "blueprints": {
                "damage": self.blueprint_damage,
                "health": self.blueprint_health,
                "armor": self.blueprint_armor,
            },
            "inscriptionLevel": self.inscription_level,
            "sacredLevel": self.sacred_level,
        }

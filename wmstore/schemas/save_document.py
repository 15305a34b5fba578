"""Save Document Schemas — Pydantic models for the canonical wire format and import reports.

Invariants:
    - CanonicalSaveDocument always dumps with camelCase keys (by_alias=True)
    - version is always SAVE_VERSION
    - Catalog ids keep their JSON type (1 stays int, "1" stays str)

Design Decisions:
    - Models shape exports only; imports go through core/validate_save so every
      defect is collected instead of stopping at the first pydantic error
"""

from pydantic import BaseModel, ConfigDict, Field

from wmstore.core.domain_types import CatalogId, SaveFormat
from wmstore.core.schema_constants import (
    SAVE_VERSION, default_general, zero_artifacts,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class GeneralBlock(_CamelModel):
    engineer_level: int = Field(0, ge=0, alias="engineerLevel")
    scarab_level: int = Field(0, ge=0, alias="scarabLevel")
    rift_rank: str = Field(..., alias="riftRank")


class StatTriple(_CamelModel):
    damage: int = Field(0, ge=0)
    health: int = Field(0, ge=0)
    armor: int = Field(0, ge=0)


class MachineRecord(_CamelModel):
    id: CatalogId
    rarity: str
    level: int = Field(0, ge=0)
    blueprints: StatTriple
    inscription_level: int = Field(0, ge=0, alias="inscriptionLevel")
    sacred_level: int = Field(0, ge=0, alias="sacredLevel")


class HeroRecord(_CamelModel):
    id: CatalogId
    percentages: StatTriple


class CanonicalSaveDocument(_CamelModel):
    """Current interchange shape. Everything older is converted into this."""
    version: int = SAVE_VERSION
    app_version: str = Field(..., alias="appVersion")
    general: GeneralBlock
    machines: list[MachineRecord] = Field(default_factory=list)
    heroes: list[HeroRecord] = Field(default_factory=list)
    artifacts: dict[str, dict[int, int]]

    @classmethod
    def empty(cls, app_version: str) -> "CanonicalSaveDocument":
        """Minimal loadable document: default general, no entities, zero artifacts."""
        return cls(
            appVersion=app_version,
            general=GeneralBlock(**default_general()),
            artifacts=zero_artifacts(),
        )

    @classmethod
    def from_state(cls, state: dict, app_version: str) -> "CanonicalSaveDocument":
        """Build from the dict EntityRepository.load_state returns."""
        return cls(
            appVersion=app_version,
            general=GeneralBlock(
                engineerLevel=state["engineerLevel"],
                scarabLevel=state["scarabLevel"],
                riftRank=state["riftRank"],
            ),
            machines=state["machines"],
            heroes=state["heroes"],
            artifacts=state["artifacts"],
        )

    def to_wire(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


class ImportReport(BaseModel):
    """What import_data did, for the caller's success message."""
    profile_id: int
    source_format: SaveFormat
    was_converted: bool
    source_app_version: str | None = None
    needs_resave: bool = False
    machines: int = 0
    heroes: int = 0

    @property
    def message(self) -> str:
        if self.was_converted:
            return "Data loaded and converted to current format!"
        return "Data loaded successfully!"

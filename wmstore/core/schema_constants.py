"""Schema Constants — fixed enumerations and defaults for the save schema.

Invariants:
    - ARTIFACT_STATS × ARTIFACT_TIERS is the complete artifact space
    - SAVE_VERSION is the only version number ever emitted
    - Pure data: no IO, no mutation helpers beyond fresh-copy builders
"""

from wmstore.core.domain_types import ArtifactStat, RiftRank, Rarity

APP_VERSION = "2.4.0"
SAVE_VERSION = 1

DEFAULT_MAX_PROFILES = 5
DEFAULT_PROFILE_NAME = "Default"

ARTIFACT_STATS: tuple[str, ...] = tuple(s.value for s in ArtifactStat)
ARTIFACT_TIERS: tuple[int, ...] = (30, 35, 40, 45, 50, 55, 60, 65)

BLUEPRINT_STATS: tuple[str, ...] = ("damage", "health", "armor")
HERO_PERCENTAGE_STATS: tuple[str, ...] = ("damage", "health", "armor")
MAX_HERO_PERCENTAGE = 20

DEFAULT_ENGINEER_LEVEL = 0
DEFAULT_SCARAB_LEVEL = 0
DEFAULT_RIFT_RANK = RiftRank.BRONZE.value
DEFAULT_RARITY = Rarity.COMMON.value

# Intermediate-format config keys folded into `general`
GENERAL_FIELDS: tuple[str, ...] = ("engineerLevel", "scarabLevel", "riftRank")


def default_general() -> dict:
    """Fresh general-settings dict with default values."""
    return {
        "engineerLevel": DEFAULT_ENGINEER_LEVEL,
        "scarabLevel": DEFAULT_SCARAB_LEVEL,
        "riftRank": DEFAULT_RIFT_RANK,
    }


def zero_tiers() -> dict[int, int]:
    """Fresh tier → count mapping with every known tier at 0."""
    return {tier: 0 for tier in ARTIFACT_TIERS}


def zero_artifacts() -> dict[str, dict[int, int]]:
    """Fresh artifacts mapping covering every stat × tier at 0."""
    return {stat: zero_tiers() for stat in ARTIFACT_STATS}

"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - ProfileId wraps the integer primary key of the profiles table
    - CatalogId is whatever the game catalog uses (int or str), never coerced
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType, Union


# ─── Identity Types ──────────────────────────────────────────────

ProfileId = NewType("ProfileId", int)
CatalogId = Union[int, str]


# ─── Enums ───────────────────────────────────────────────────────

class SaveFormat(str, Enum):
    """Closed set of save-document shapes recognized on import."""
    LEGACY = "legacy"
    INTERMEDIATE = "intermediate"
    FINAL = "final"
    UNKNOWN = "unknown"


class ArtifactStat(str, Enum):
    """Stat categories an artifact can boost."""
    DAMAGE = "damage"
    HEALTH = "health"
    ARMOR = "armor"


class OptimizeMode(str, Enum):
    """Optimizer modes — the only keys save_result accepts, one slot each."""
    CAMPAIGN = "campaign"
    ARENA = "arena"


class Rarity(str, Enum):
    """Machine rarity ladder, lowest first."""
    COMMON = "common"
    UNCOMMON = "uncommon"
    RARE = "rare"
    EPIC = "epic"
    LEGENDARY = "legendary"
    MYTHIC = "mythic"
    TITAN = "titan"
    ANGEL = "angel"
    CELESTIAL = "celestial"


class RiftRank(str, Enum):
    """Chaos Rift ranks, lowest first."""
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"
    PEARL = "pearl"
    SAPPHIRE = "sapphire"
    EMERALD = "emerald"
    RUBY = "ruby"
    PLATINUM = "platinum"
    DIAMOND = "diamond"

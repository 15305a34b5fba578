"""ORM Models — SQLAlchemy declarative models for all persisted entities.

Invariants:
    - All models inherit from Base (db/base.py)
    - Profile is the aggregate root; every other entity is scoped by profile_id

Design Decisions:
    - One file per entity for locality
    - All models imported here so Base.metadata is complete before create_all
"""

from wmstore.models.profile import Profile  # noqa: F401
from wmstore.models.general_settings import GeneralSettings  # noqa: F401
from wmstore.models.machine import Machine  # noqa: F401
from wmstore.models.hero import Hero  # noqa: F401
from wmstore.models.artifact import Artifact  # noqa: F401
from wmstore.models.optimization_result import OptimizationResult  # noqa: F401

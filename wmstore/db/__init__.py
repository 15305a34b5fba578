"""Database Package — SQLAlchemy Base and standalone session factory.

Invariants:
    - All ORM models inherit from db.base.Base
    - All sessions are async (AsyncSession)
"""

"""Infrastructure Layer — storage engine lifecycle and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/
    - Every SQLAlchemy failure leaves this layer as a StorageError
"""

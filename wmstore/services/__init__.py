"""Services Layer — profile lifecycle, entity repository, import/export, auto-save.

Invariants:
    - Every multi-row write runs inside one DatabaseSessionManager.transaction()
    - The active profile is read fresh at the start of each operation
"""

"""User Directory API Package — CRUD service for user records.

Invariants:
    - Package root holds only the version constant (import side-effects prohibited)
"""

__version__ = "1.0.0"

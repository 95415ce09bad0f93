"""Infrastructure Layer — document store client and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - Driver errors surface as core/errors.py types, never raw pymongo exceptions
"""

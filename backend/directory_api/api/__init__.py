"""API Layer — FastAPI routes, middleware and error handlers.

Invariants:
    - Routes registered explicitly in main.py (no auto-discovery)
    - All endpoints return the {success, message, ...} JSON envelope
"""

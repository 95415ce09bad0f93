"""User Directory Client — terminal client for the User Directory API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
    - Field rules come from directory_api.core.user_rules, never redefined here
"""

"""Pydantic Schemas — request/response shapes for API endpoints.

Invariants:
    - Wire names are camelCase (phoneNumber, companyName, createdAt, updatedAt)
    - Request schemas only check JSON shape; field rules live in core/user_rules.py
    - Shared with directory_client, which parses responses into UserRecord
"""

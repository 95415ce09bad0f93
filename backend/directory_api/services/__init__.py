"""Services Layer — persistence access for user records.

Invariants:
    - Field rules are enforced here, at the persistence boundary, before any write
    - Routes call services; services never build HTTP responses
"""

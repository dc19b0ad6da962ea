"""Users API — pooled PostgreSQL CRUD service for user records.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""

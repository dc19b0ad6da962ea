"""Services Layer — store operations behind the route handlers.

Invariants:
    - Each operation issues exactly one SQL statement through one pooled session
    - All values reach SQL as bound parameters
"""

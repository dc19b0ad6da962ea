"""Route Modules — one file per resource/concern.

Invariants:
    - Each module defines its own APIRouter
    - Routes never contain SQL (delegate to services/)
    - Explicit registration in main.py
"""

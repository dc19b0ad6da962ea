"""Infrastructure Layer — database pool and logging.

Invariants:
    - Infrastructure never imports from api/ or services/
    - All store calls go through DatabaseSessionManager.session()
"""

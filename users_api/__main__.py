"""Run the API under uvicorn: ``python -m users_api`` or ``users-api``.

uvicorn handles SIGTERM/SIGINT: it stops accepting connections, lets
in-flight requests finish, runs the lifespan shutdown (pool drain) and
exits with status 0.
"""

import uvicorn

from users_api.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run(
        "users_api.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()

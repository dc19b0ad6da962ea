"""User Store Operations — list, fetch by id, and create.

Invariants:
    - One statement per operation (SELECT, SELECT, INSERT ... RETURNING)
    - All user-supplied values are bound parameters of SQLAlchemy expressions
    - get_user never rejects an id as malformed: anything that cannot denote a
      users.id matches no row and raises UserNotFoundError
    - create_user maps the store's unique violation to EmailAlreadyExistsError
"""

import logging

from sqlalchemy import insert, select

from users_api.core.errors import (
    EmailAlreadyExistsError, UniqueViolationError, UserNotFoundError,
)
from users_api.infrastructure.database import DatabaseSessionManager
from users_api.models.user import User
from users_api.schemas.user import UserCreate, UserRead

logger = logging.getLogger(__name__)

# users.id is a 32-bit INTEGER column
ID_MIN = -(2 ** 31)
ID_MAX = 2 ** 31 - 1


def parse_user_id(raw: str) -> int | None:
    """Integer value of a path id, or None if no row could carry it."""
    digits = raw[1:] if raw.startswith(("+", "-")) else raw
    if not (digits.isascii() and digits.isdigit()):
        return None
    value = int(raw)
    if not ID_MIN <= value <= ID_MAX:
        return None
    return value


async def list_users(db: DatabaseSessionManager) -> list[UserRead]:
    """All users in ascending id order."""
    async with db.session() as session:
        result = await session.scalars(select(User).order_by(User.id))
        return [UserRead.model_validate(u) for u in result.all()]


async def get_user(db: DatabaseSessionManager, user_id: str) -> UserRead:
    """User with the given id, or UserNotFoundError."""
    parsed = parse_user_id(user_id)
    if parsed is None:
        logger.info(
            "Unparseable user id treated as missing",
            extra={"user_id": user_id},
        )
        raise UserNotFoundError(user_id)
    async with db.session() as session:
        user = await session.scalar(select(User).where(User.id == parsed))
        if user is None:
            raise UserNotFoundError(user_id)
        return UserRead.model_validate(user)


async def create_user(db: DatabaseSessionManager, body: UserCreate) -> UserRead:
    """Insert a user and return the stored row."""
    stmt = (
        insert(User)
        .values(name=body.name, email=body.email, department=body.department)
        .returning(User)
    )
    try:
        async with db.session() as session:
            user = await session.scalar(stmt)
            await session.commit()
            return UserRead.model_validate(user)
    except UniqueViolationError:
        raise EmailAlreadyExistsError(body.email) from None

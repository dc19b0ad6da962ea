"""User Store Operations — id parsing, single-statement CRUD, conflict mapping."""

import pytest

from users_api.core.errors import EmailAlreadyExistsError, UserNotFoundError
from users_api.schemas.user import UserCreate
from users_api.services.users import (
    create_user, get_user, list_users, parse_user_id,
)


@pytest.mark.parametrize("raw, expected", [
    ("1", 1),
    ("0042", 42),
    ("-3", -3),
    ("+7", 7),
    ("2147483647", 2147483647),
    ("2147483648", None),
    ("abc", None),
    ("1.0", None),
    ("1_000", None),
    ("١", None),
    ("-٣", None),
    (" 1", None),
    ("-", None),
])
def test_parse_user_id(raw, expected):
    assert parse_user_id(raw) == expected


async def test_create_and_get(db_manager):
    created = await create_user(
        db_manager, UserCreate(name="Ann", email="ann@x.com", department="Eng"),
    )

    fetched = await get_user(db_manager, str(created.id))

    assert fetched == created


async def test_create_duplicate_email_raises_conflict(db_manager):
    await create_user(db_manager, UserCreate(name="Ann", email="ann@x.com"))

    with pytest.raises(EmailAlreadyExistsError) as info:
        await create_user(db_manager, UserCreate(name="Bo", email="ann@x.com"))
    assert info.value.email == "ann@x.com"
    assert [u.name for u in await list_users(db_manager)] == ["Ann"]


async def test_get_missing_raises_not_found(db_manager):
    with pytest.raises(UserNotFoundError):
        await get_user(db_manager, "1")


async def test_get_unparseable_id_skips_store(db_manager):
    await db_manager.close()

    # a closed pool would raise DatabaseError if the store were touched
    with pytest.raises(UserNotFoundError):
        await get_user(db_manager, "not-a-number")


async def test_values_are_bound_not_interpolated(db_manager):
    hostile = "x'); DROP TABLE users; --"
    await create_user(db_manager, UserCreate(name=hostile, email="h@x.com"))

    users = await list_users(db_manager)

    assert users[0].name == hostile

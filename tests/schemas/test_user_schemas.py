"""User Schemas — required fields and row serialization."""

import pytest
from pydantic import ValidationError

from users_api.models.user import User
from users_api.schemas.user import REQUIRED_FIELDS_MESSAGE, UserCreate, UserRead


def test_create_accepts_name_email_department():
    body = UserCreate(name="Ann", email="ann@x.com", department="Eng")
    assert body.department == "Eng"


def test_create_department_defaults_to_none():
    assert UserCreate(name="Ann", email="ann@x.com").department is None


@pytest.mark.parametrize("kwargs", [
    {"email": "ann@x.com"},
    {"name": "Ann"},
    {"name": "", "email": "ann@x.com"},
    {"name": "Ann", "email": ""},
])
def test_create_requires_name_and_email(kwargs):
    with pytest.raises(ValidationError) as info:
        UserCreate(**kwargs)
    assert info.value.errors()[0]["msg"] == REQUIRED_FIELDS_MESSAGE


def test_create_ignores_unknown_fields():
    body = UserCreate(name="Ann", email="ann@x.com", id=5)
    assert not hasattr(body, "id")


def test_read_from_orm_row():
    row = User(id=3, name="Ann", email="ann@x.com", department=None)
    assert UserRead.model_validate(row).model_dump() == {
        "id": 3, "name": "Ann", "email": "ann@x.com", "department": None,
    }

"""User Schemas — Pydantic models for the /api/users boundary.

Invariants:
    - UserCreate.name and UserCreate.email must both be present and non-empty
    - UserCreate.department is optional and may be null
    - UserRead mirrors the users row exactly: id, name, email, department

Design Decisions:
    - name/email declared optional and checked together in one model validator,
      so any combination of missing fields yields the same single message
    - PydanticCustomError keeps the message free of the "Value error," prefix
"""

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic_core import PydanticCustomError

REQUIRED_FIELDS_MESSAGE = "Name and email are required"


class UserCreate(BaseModel):
    """User creation: name and email required, department optional."""
    name: str | None = None
    email: str | None = None
    department: str | None = None

    @model_validator(mode="after")
    def require_name_and_email(self):
        if not self.name or not self.email:
            raise PydanticCustomError("required_fields", REQUIRED_FIELDS_MESSAGE)
        return self


class UserRead(BaseModel):
    """Public-facing user data."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    department: str | None = None

"""User ORM — the single persisted entity.

Invariants:
    - id is an integer primary key assigned by the store on insert
    - name and email are non-nullable
    - email is unique (enforced by the store, not the service)
    - department is optional
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from users_api.db.base import Base


class User(Base):
    """User record."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(
        Integer, primary_key=True, autoincrement=True,
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    department: Mapped[str | None] = mapped_column(
        String(255), nullable=True,
    )

    def __repr__(self) -> str:
        return f"User(id={self.id!r}, email={self.email!r})"

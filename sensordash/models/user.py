# sensordash/models/user.py
from sqlmodel import SQLModel, Field

from sensordash.core.roles import Role


class RoleRow(SQLModel, table=True):
    """
    Lookup table for role labels.

    `users.role_id` references this table; the canonical id <-> label
    mapping lives in `sensordash.core.roles.Role`.
    """

    __tablename__ = "roles"

    role_id: int = Field(primary_key=True)
    role: str = Field(unique=True, max_length=50)


class User(SQLModel, table=True):
    """
    Dashboard account.

    `password` holds the argon2 digest, never plaintext.
    """

    __tablename__ = "users"

    user_id: int | None = Field(default=None, primary_key=True)

    email: str = Field(
        unique=True,
        index=True,
        max_length=255,
    )

    phone: str | None = Field(default=None, max_length=50)

    role_id: int = Field(
        foreign_key="roles.role_id",
        index=True,
        description="1 = admin, 2 = user",
    )

    password: str = Field(description="argon2 digest")

    @property
    def role(self) -> Role:
        return Role.from_id(self.role_id)

    @property
    def is_admin(self) -> bool:
        return self.role_id == Role.ADMIN.id

# sensordash/schemas/user.py
from pydantic import EmailStr, ConfigDict, field_validator
from sqlmodel import SQLModel

from sensordash.core.roles import Role


class UserPublic(SQLModel):
    """
    User as handed out after authentication. No password field.
    """

    model_config = ConfigDict(extra="forbid")

    user_id: int
    email: str
    phone: str | None = None
    role: Role | None = None


class UserListItem(SQLModel):
    """
    Row of the admin user listing; `role` is the label from the roles
    table and may be any label stored there.
    """

    model_config = ConfigDict(extra="forbid")

    user_id: int
    email: str
    phone: str | None = None
    role: str | None = None


class UserRegistration(SQLModel):
    """
    Registration form payload.

    Validation rules:
      - email must be a valid EmailStr
      - role must be "admin" or "user"
      - password cannot be empty
    """

    model_config = ConfigDict(extra="forbid")

    email: EmailStr
    phone: str | None = None
    role: Role = Role.USER
    password: str
    confirm_password: str

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator("password")
    @classmethod
    def password_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("password cannot be empty")
        return v

    @property
    def passwords_match(self) -> bool:
        return self.password == self.confirm_password

# sensordash/core/roles.py
from enum import Enum

from sensordash.core.errors import InvalidRoleError


class Role(str, Enum):
    """
    Application role.

    Storage representation is the integer `role_id` of the `roles` table:
      - admin <-> 1
      - user  <-> 2
    """

    ADMIN = "admin"
    USER = "user"

    @property
    def id(self) -> int:
        return _ROLE_IDS[self]

    @classmethod
    def from_id(cls, role_id: int) -> "Role":
        # bool is an int subclass; True must not be read as admin
        if isinstance(role_id, bool) or not isinstance(role_id, int):
            raise InvalidRoleError(f"Invalid role id: {role_id!r}")
        for role, value in _ROLE_IDS.items():
            if value == role_id:
                return role
        raise InvalidRoleError(f"Unknown role id: {role_id!r}")

    @classmethod
    def from_label(cls, label: str) -> "Role":
        if not isinstance(label, str):
            raise InvalidRoleError(f"Invalid role label: {label!r}")
        try:
            return cls(label)
        except ValueError:
            raise InvalidRoleError(f"Unknown role label: {label!r}")

    @classmethod
    def parse(cls, value: "str | int | Role") -> "Role":
        """Accept either storage form (label or id) and return the enum."""
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            return cls.from_label(value)
        return cls.from_id(value)


_ROLE_IDS: dict[Role, int] = {
    Role.ADMIN: 1,
    Role.USER: 2,
}


def role_convert(value: "str | int") -> "int | str":
    """
    Convert between the two storage forms of a role.

      "admin" -> 1, "user" -> 2
      1 -> "admin", 2 -> "user"

    Raises:
        InvalidRoleError: for any value outside the enumerated set.
    """
    if isinstance(value, Role):
        return value.id
    if isinstance(value, str):
        return Role.from_label(value).id
    return Role.from_id(value).value

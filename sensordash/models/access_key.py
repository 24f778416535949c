# sensordash/models/access_key.py
from datetime import datetime

from sqlalchemy import DateTime, func
from sqlmodel import SQLModel, Field


class AccessKey(SQLModel, table=True):
    """
    API access key issued by an admin to a user.

    Keys are never updated in place; reissuing means inserting a new row.
    `status` is stored for display only and is not checked anywhere.
    """

    __tablename__ = "access_keys"

    key_id: int | None = Field(default=None, primary_key=True)

    owner_id: int = Field(
        foreign_key="users.user_id",
        index=True,
    )

    key: str = Field(unique=True, max_length=255)

    status: str = Field(default="active", max_length=20)

    # Assigned by the database so the returned time is the server's
    creation_time: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": func.now()},
    )

# sensordash/models/session.py
from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


class SessionRow(SQLModel, table=True):
    """
    Durable login session.

    Only the owning user id is stored; the user record is loaded fresh
    on every request.
    """

    __tablename__ = "sessions"

    sid: str = Field(primary_key=True, max_length=128)

    user_id: int = Field(
        foreign_key="users.user_id",
        index=True,
    )

    expire: datetime = Field(sa_type=DateTime(timezone=True), index=True)

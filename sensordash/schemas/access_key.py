# sensordash/schemas/access_key.py
from datetime import datetime

from pydantic import ConfigDict
from sqlmodel import SQLModel


class AccessKeyRead(SQLModel):
    """
    Access key row joined with its owner, for the admin listing.
    Owner columns are None if the owner row is gone.
    """
    model_config = ConfigDict(extra="forbid")

    key_id: int
    key: str
    status: str | None
    creation_time: datetime | None
    user_id: int | None
    email: str | None
    role_id: int | None
    role: str | None

# sensordash/repositories/access_key_repo.py
from datetime import datetime

from sqlmodel import Session, select

from sensordash.models.access_key import AccessKey
from sensordash.models.user import RoleRow, User
from sensordash.schemas.access_key import AccessKeyRead


class AccessKeyRepository:
    """
    Data access layer for AccessKey.
    """

    def list_with_owners(self, session: Session) -> list[AccessKeyRead]:
        """
        All keys with owner email and role (outer joins, so orphaned keys
        still show up).
        """
        stmt = (
            select(
                User.user_id,
                User.email,
                User.role_id,
                RoleRow.role,
                AccessKey.key_id,
                AccessKey.key,
                AccessKey.status,
                AccessKey.creation_time,
            )
            .join(User, User.user_id == AccessKey.owner_id, isouter=True)
            .join(RoleRow, RoleRow.role_id == User.role_id, isouter=True)
            .order_by(AccessKey.key_id)
        )
        return [AccessKeyRead(**row._mapping) for row in session.exec(stmt).all()]

    def add(self, session: Session, owner_id: int, key: str) -> datetime:
        """Insert a key and return the creation time assigned by the database."""
        access_key = AccessKey(owner_id=owner_id, key=key)
        session.add(access_key)
        session.commit()
        session.refresh(access_key)
        return access_key.creation_time

# sensordash/services/access_key_service.py
import logging
from datetime import datetime

from sqlmodel import Session

from sensordash.core.errors import NotFoundError
from sensordash.core.security import create_access_key
from sensordash.repositories.access_key_repo import AccessKeyRepository
from sensordash.repositories.user_repo import UserRepository
from sensordash.schemas.access_key import AccessKeyRead

logger = logging.getLogger(__name__)


class AccessKeyService:
    """
    Business logic for access keys (admin only).
    """

    def __init__(self, repo: AccessKeyRepository, user_repo: UserRepository):
        self.repo = repo
        self.user_repo = user_repo

    def list_keys(self, session: Session) -> list[AccessKeyRead]:
        return self.repo.list_with_owners(session)

    def add_access_key(
        self,
        session: Session,
        user_email: str,
        key: str | None = None,
    ) -> datetime:
        """
        Issue a key for the user with `user_email`.

        A key is generated when none (or a blank one) is supplied.

        Returns:
            Creation time assigned by the database.

        Raises:
            NotFoundError: no user with this email; nothing is written.
        """
        user = self.user_repo.get_by_email(session, user_email)
        if user is None:
            raise NotFoundError(f"Unable to look up user {user_email}.")

        if not key or not key.strip():
            key = create_access_key()

        creation_time = self.repo.add(session, user.user_id, key.strip())
        logger.info("Access key added for user %s at %s", user.email, creation_time)
        return creation_time

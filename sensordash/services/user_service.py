# sensordash/services/user_service.py
import logging

from sqlmodel import Session

from sensordash.core.errors import NotFoundError, ValidationFailure
from sensordash.core.security import hash_password
from sensordash.repositories.user_repo import UserRepository
from sensordash.schemas.user import UserListItem, UserPublic, UserRegistration

logger = logging.getLogger(__name__)


class UserService:
    """
    Business logic for User.

    Responsibilities:
      - registration rules (password confirmation)
      - hashing the password before it is stored
      - credential checks for login
    """

    def __init__(self, repo: UserRepository):
        self.repo = repo

    def register(self, session: Session, payload: UserRegistration) -> int:
        """
        Create a user from the registration form.

        Raises:
            ValidationFailure: passwords differ (nothing is written).
            HashingError: argon2 failed.
            ConflictError: email already registered.
        """
        if not payload.passwords_match:
            raise ValidationFailure("Password does not match.")

        digest = hash_password(payload.password)
        user_id = self.repo.add_user(
            session,
            email=payload.email,
            phone=payload.phone,
            role=payload.role,
            password_digest=digest,
        )
        logger.info("New user has id %s.", user_id)
        return user_id

    def authenticate(self, session: Session, email: str, password: str) -> UserPublic | None:
        """
        Return the user for a valid email/password pair, else None.

        Unknown emails are reported the same way as wrong passwords.
        """
        try:
            return self.repo.validate_user(session, email, password)
        except NotFoundError:
            logger.info("Login attempt for unknown email %s", email)
            return None

    def list_users(self, session: Session) -> list[UserListItem]:
        return self.repo.list_with_roles(session)

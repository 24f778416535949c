# sensordash/repositories/user_repo.py
import logging

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from sensordash.core.errors import ConflictError, InvalidRoleError, NotFoundError
from sensordash.core.roles import Role
from sensordash.core.security import check_needs_rehash, hash_password, verify_password
from sensordash.models.user import RoleRow, User
from sensordash.schemas.user import UserListItem, UserPublic

logger = logging.getLogger(__name__)


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP
    """

    # ----- Lookups -----

    def get_by_id(self, session: Session, user_id: int) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_email(self, session: Session, email: str) -> User | None:
        """Return a User by unique email, or None if not found."""
        stmt = select(User).where(User.email == email)
        return session.exec(stmt).first()

    def list_with_roles(self, session: Session) -> list[UserListItem]:
        """All users with the role label from the roles table."""
        stmt = (
            select(User.user_id, User.email, User.phone, RoleRow.role)
            .join(RoleRow, RoleRow.role_id == User.role_id)
            .order_by(User.user_id)
        )
        return [UserListItem(**row._mapping) for row in session.exec(stmt).all()]

    # ----- Writes -----

    def add_user(
        self,
        session: Session,
        email: str,
        phone: str | None,
        role: "Role | str | int",
        password_digest: str,
    ) -> int:
        """
        Insert a new user and return its id.

        `role` may be a Role, a label or a role id; it is converted to the
        stored id and rejected if unknown.

        Raises:
            InvalidRoleError: unknown role.
            ConflictError: email already registered (unique constraint).
        """
        role_id = Role.parse(role).id

        user = User(
            email=email,
            phone=phone,
            role_id=role_id,
            password=password_digest,
        )
        session.add(user)
        try:
            session.commit()
        except IntegrityError as e:
            session.rollback()
            logger.warning("Insert of user %s violated a constraint: %s", email, e.orig)
            raise ConflictError(f"User {email} already exists.") from e
        session.refresh(user)
        return user.user_id

    # ----- Credentials -----

    def validate_user(
        self,
        session: Session,
        email: str,
        password: str,
    ) -> UserPublic | None:
        """
        Check an email/password pair.

        Returns:
            The user without its password on success, None on a wrong password.
            A digest made with outdated argon2 parameters is upgraded in place.

        Raises:
            NotFoundError: no user has this email.
        """
        user = self.get_by_email(session, email)
        if user is None:
            raise NotFoundError(f"No user with email {email}")

        if not verify_password(user.password, password):
            return None

        if check_needs_rehash(user.password):
            user.password = hash_password(password)
            session.add(user)
            session.commit()
            session.refresh(user)
            logger.info("Upgraded password hash for user %s", user.user_id)

        return to_public(user)


def to_public(user: User) -> UserPublic:
    try:
        role = user.role
    except InvalidRoleError:
        # the roles table may hold labels beyond admin/user; those users get no admin rights
        logger.warning("User %s has unrecognized role id %s", user.user_id, user.role_id)
        role = None
    return UserPublic(
        user_id=user.user_id,
        email=user.email,
        phone=user.phone,
        role=role,
    )

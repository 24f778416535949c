# sensordash/core/auth.py
from fastapi import Depends, Request
from sqlmodel import Session

from sensordash.core.config import get_settings
from sensordash.core.errors import AdminRequired, AuthenticationRequired
from sensordash.core.sessions import SessionStore, decode_session_cookie
from sensordash.database import get_session
from sensordash.models.user import User
from sensordash.repositories.user_repo import UserRepository

settings = get_settings()

user_repo = UserRepository()


def get_session_store(request: Request) -> SessionStore:
    """The session store created at startup (see main.py)."""
    return request.app.state.session_store


def get_session_id(request: Request) -> str | None:
    """Session id from the signed cookie, or None if absent/invalid."""
    return decode_session_cookie(request.cookies.get(settings.SESSION_COOKIE_NAME))


def get_current_user(
    request: Request,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> User | None:
    """
    Resolve the current user from the session cookie.

    Flow:
      1. No cookie / bad signature => None.
      2. Session id unknown or expired => None.
      3. Load the user row fresh, so role changes apply immediately.

    Returns:
        User if authenticated, else None. Never raises for a bad cookie.
    """
    user_id = store.resolve(session, get_session_id(request))
    if user_id is None:
        return None

    user = user_repo.get_by_id(session, user_id)
    request.state.user = user
    return user


def require_auth(
    request: Request,
    user: User | None = Depends(get_current_user),
) -> User:
    """
    Enforce authentication.

    Raises:
        AuthenticationRequired: rendered as the login page by main.py.
    """
    if user is None:
        raise AuthenticationRequired(request.method, request.url.path)
    return user


def require_admin(
    request: Request,
    user: User = Depends(require_auth),
) -> User:
    """
    Enforce admin role. Unauthenticated requests fail in require_auth first.

    Raises:
        AdminRequired: rendered as the login page by main.py.
    """
    if not user.is_admin:
        raise AdminRequired(request.method, request.url.path)
    return user

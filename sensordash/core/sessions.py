# sensordash/core/sessions.py
"""
Login sessions.

A session binds an opaque session id (sid) to a user id until an absolute
expiry. The browser never sees the sid in the clear: the cookie carries an
HS256-signed JWT whose only claims are `sid` and `exp`.

Two stores share one interface and are picked by SESSION_BACKEND:
  - DatabaseSessionStore: rows in the `sessions` table (survives restarts)
  - MemorySessionStore: dict in process memory, guarded by a lock because
    sync FastAPI handlers run on a thread pool
"""
import logging
import secrets
import threading
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from sqlmodel import Session

from sensordash.core.config import Settings, get_settings
from sensordash.repositories.session_repo import SessionRepository

logger = logging.getLogger(__name__)

SESSION_ID_BYTES = 32
COOKIE_ALG = "HS256"


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """
    Normalize a stored timestamp to aware UTC.

    SQLite hands back timestamp columns without an offset; those values
    were written as UTC.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_session_id() -> str:
    return secrets.token_hex(SESSION_ID_BYTES)


class SessionStore(ABC):
    """
    Interface shared by the session backends.

    `resolve` must never raise for a bad, unknown or expired sid; it
    returns None and the request is treated as unauthenticated.
    """

    def __init__(self, max_age: timedelta):
        self.max_age = max_age

    @abstractmethod
    def create(self, db: Session, user_id: int) -> tuple[str, datetime]:
        """Open a session for `user_id`; return (sid, expiry)."""

    @abstractmethod
    def resolve(self, db: Session, sid: str | None) -> int | None:
        """Return the user id bound to `sid`, or None."""

    @abstractmethod
    def destroy(self, db: Session, sid: str) -> None:
        """Forget `sid`. Unknown sids are ignored."""

    @abstractmethod
    def purge_expired(self, db: Session) -> int:
        """Drop expired sessions; return how many were removed."""


class DatabaseSessionStore(SessionStore):

    def __init__(self, max_age: timedelta, repo: SessionRepository | None = None):
        super().__init__(max_age)
        self.repo = repo or SessionRepository()

    def create(self, db: Session, user_id: int) -> tuple[str, datetime]:
        sid = new_session_id()
        expire = utcnow() + self.max_age
        self.repo.create(db, sid, user_id, expire)
        return sid, expire

    def resolve(self, db: Session, sid: str | None) -> int | None:
        if not sid:
            return None
        row = self.repo.get(db, sid)
        if row is None:
            return None
        if as_utc(row.expire) <= utcnow():
            self.repo.delete(db, sid)
            return None
        return row.user_id

    def destroy(self, db: Session, sid: str) -> None:
        self.repo.delete(db, sid)

    def purge_expired(self, db: Session) -> int:
        return self.repo.delete_expired(db, utcnow())


class MemorySessionStore(SessionStore):
    """
    In-process sid -> (user_id, expiry) map.

    Sessions are lost on restart and are not shared between worker
    processes.
    """

    def __init__(self, max_age: timedelta):
        super().__init__(max_age)
        self._sessions: dict[str, tuple[int, datetime]] = {}
        self._lock = threading.Lock()

    def create(self, db: Session, user_id: int) -> tuple[str, datetime]:
        sid = new_session_id()
        now = utcnow()
        expire = now + self.max_age
        with self._lock:
            # abandoned logins are never resolved again; sweep them here
            self._drop_expired(now)
            self._sessions[sid] = (user_id, expire)
        return sid, expire

    def resolve(self, db: Session, sid: str | None) -> int | None:
        if not sid:
            return None
        with self._lock:
            entry = self._sessions.get(sid)
            if entry is None:
                return None
            user_id, expire = entry
            if expire <= utcnow():
                del self._sessions[sid]
                return None
            return user_id

    def destroy(self, db: Session, sid: str) -> None:
        with self._lock:
            self._sessions.pop(sid, None)

    def purge_expired(self, db: Session) -> int:
        with self._lock:
            return self._drop_expired(utcnow())

    def _drop_expired(self, now: datetime) -> int:
        # caller holds self._lock
        expired = [sid for sid, (_, expire) in self._sessions.items() if expire <= now]
        for sid in expired:
            del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


def build_session_store(settings: Settings | None = None) -> SessionStore:
    settings = settings or get_settings()
    max_age = timedelta(days=settings.SESSION_MAX_AGE_DAYS)
    backend = settings.SESSION_BACKEND.strip().lower()

    if backend == "database":
        return DatabaseSessionStore(max_age)
    if backend == "memory":
        logger.warning("Using in-memory sessions; logins are lost on restart")
        return MemorySessionStore(max_age)
    raise ValueError(f"Unknown SESSION_BACKEND: {settings.SESSION_BACKEND!r}")


# -------- Cookie codec --------


def encode_session_cookie(sid: str, expire: datetime, secret: str | None = None) -> str:
    """
    Sign `sid` into a cookie value that expires together with the session.
    """
    secret = secret or get_settings().SESSION_SECRET
    claims = {
        "sid": sid,
        "exp": int(as_utc(expire).timestamp()),
    }
    return jwt.encode(claims, secret, algorithm=COOKIE_ALG)


def decode_session_cookie(value: str | None, secret: str | None = None) -> str | None:
    """
    Verify a cookie value and return the session id it carries.

    Tampered, expired or malformed cookies yield None.
    """
    if not value:
        return None
    secret = secret or get_settings().SESSION_SECRET
    try:
        claims = jwt.decode(value, secret, algorithms=[COOKIE_ALG])
    except JWTError:
        return None
    sid = claims.get("sid")
    if not isinstance(sid, str) or not sid:
        return None
    return sid

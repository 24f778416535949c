# sensordash/repositories/session_repo.py
from datetime import datetime

from sqlmodel import Session, select

from sensordash.models.session import SessionRow


class SessionRepository:
    """
    Data access layer for durable login sessions.
    """

    def get(self, session: Session, sid: str) -> SessionRow | None:
        return session.get(SessionRow, sid)

    def create(self, session: Session, sid: str, user_id: int, expire: datetime) -> SessionRow:
        row = SessionRow(sid=sid, user_id=user_id, expire=expire)
        session.add(row)
        session.commit()
        session.refresh(row)
        return row

    def delete(self, session: Session, sid: str) -> None:
        row = session.get(SessionRow, sid)
        if row is not None:
            session.delete(row)
            session.commit()

    def delete_expired(self, session: Session, now: datetime) -> int:
        """Drop every session whose expiry is in the past; return how many."""
        expired = session.exec(
            select(SessionRow).where(SessionRow.expire <= now)
        ).all()
        for row in expired:
            session.delete(row)
        if expired:
            session.commit()
        return len(expired)

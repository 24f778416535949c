# sensordash/routers/auth.py
import logging

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlmodel import Session

from sensordash.core.auth import get_session_id, get_session_store, require_auth
from sensordash.core.config import get_settings
from sensordash.core.sessions import SessionStore, encode_session_cookie
from sensordash.core.views import render_login, render_page
from sensordash.database import get_session
from sensordash.models.user import User
from sensordash.repositories.user_repo import UserRepository
from sensordash.services.user_service import UserService

logger = logging.getLogger(__name__)

settings = get_settings()

router = APIRouter(tags=["Auth"])

repo = UserRepository()
service = UserService(repo)

# Where a fresh login lands
AFTER_LOGIN_URL = "/graph?count=1000"


def _cookie_secure(request: Request) -> bool:
    """secure=auto: only when the request itself came over https."""
    return request.url.scheme == "https"


@router.get("/", response_class=HTMLResponse)
def index():
    return render_page("index")


@router.get("/login", response_class=HTMLResponse)
def login_page():
    return render_login()


@router.post("/login")
def login(
    request: Request,
    email: str = Form(...),
    password: str = Form(...),
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
):
    """
    Check credentials and open a session.

    Wrong password and unknown email produce the same page; no cookie
    is set in either case.
    """
    user = service.authenticate(session, email.strip(), password)
    if user is None:
        return render_login("Invalid username or password")

    sid, expire = store.create(session, user.user_id)
    logger.info("User %s logged in", user.email)

    response = RedirectResponse(AFTER_LOGIN_URL, status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=encode_session_cookie(sid, expire),
        max_age=settings.SESSION_MAX_AGE_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=_cookie_secure(request),
        samesite="lax",
    )
    return response


@router.get("/logout")
def logout(
    request: Request,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
    current_user: User = Depends(require_auth),
):
    """Destroy the session so the cookie no longer resolves, then go home."""
    sid = get_session_id(request)
    if sid:
        store.destroy(session, sid)
    logger.info("User %s logged out", current_user.email)

    response = RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response

# sensordash/routers/access_keys.py
import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse, RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from sensordash.core.auth import require_admin
from sensordash.core.errors import NotFoundError
from sensordash.core.views import render_page
from sensordash.database import get_session
from sensordash.repositories.access_key_repo import AccessKeyRepository
from sensordash.repositories.user_repo import UserRepository
from sensordash.services.access_key_service import AccessKeyService
from sensordash.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Access keys"], dependencies=[Depends(require_admin)])

user_repo = UserRepository()
service = AccessKeyService(AccessKeyRepository(), user_repo)
user_service = UserService(user_repo)


def _back_to_list(message: str) -> RedirectResponse:
    return RedirectResponse(
        f"/access_keys?{urlencode({'message': message})}",
        status_code=status.HTTP_303_SEE_OTHER,
    )


@router.get("/access_keys", response_class=HTMLResponse)
def access_keys_page(
    message: str | None = None,
    session: Session = Depends(get_session),
):
    """List issued keys and all users (admin only)."""
    return render_page(
        "access_keys",
        access_keys=service.list_keys(session),
        users=user_service.list_users(session),
        message=message,
    )


@router.post("/add_access_key")
def add_access_key(
    user_email: str = Form(...),
    access_key: str | None = Form(None, alias="accessKey"),
    session: Session = Depends(get_session),
):
    """
    Issue an access key for `user_email` (admin only).

    A blank key is replaced by a generated one. Always redirects back to
    the listing with a message.
    """
    try:
        creation_time = service.add_access_key(session, user_email.strip(), access_key)
    except NotFoundError as e:
        logger.error("Unable to look up user %s", user_email)
        return _back_to_list(str(e))
    except SQLAlchemyError as e:
        session.rollback()
        logger.error("Unable to add access key for %s: %s", user_email, e.__class__.__name__)
        return _back_to_list(f"Unable to add access key for user {user_email}.")

    return _back_to_list(
        f"Access key added for user {user_email} at {creation_time.isoformat()}."
    )

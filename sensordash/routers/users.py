# sensordash/routers/users.py
import logging

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import HTMLResponse
from pydantic import ValidationError
from sqlmodel import Session

from sensordash.core.auth import require_admin
from sensordash.core.errors import ConflictError, HashingError, ValidationFailure
from sensordash.core.views import render_login, render_page
from sensordash.database import get_session
from sensordash.repositories.user_repo import UserRepository
from sensordash.schemas.user import UserRegistration
from sensordash.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Users"], dependencies=[Depends(require_admin)])

repo = UserRepository()
service = UserService(repo)


@router.get("/add_user", response_class=HTMLResponse)
def add_user_page():
    """Registration form (admin only)."""
    return render_page("add_user", message=None)


@router.post("/add_user", response_class=HTMLResponse)
def add_user(
    email: str = Form(...),
    phone: str | None = Form(None),
    role: str = Form("user"),
    password: str = Form(...),
    confirm_password: str = Form(..., alias="confirmPassword"),
    session: Session = Depends(get_session),
):
    """
    Create a user (admin only). The password is hashed server-side.

    Form errors re-render the form; nothing is written in that case.
    """
    try:
        payload = UserRegistration(
            email=email,
            phone=phone,
            role=role,
            password=password,
            confirm_password=confirm_password,
        )
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err.get("loc"))
        return render_page(
            "add_user",
            status_code=status.HTTP_400_BAD_REQUEST,
            message=f"Invalid value for: {fields}.",
        )

    try:
        service.register(session, payload)
    except ValidationFailure as e:
        return render_page("add_user", message=str(e))
    except ConflictError as e:
        return render_page("add_user", status_code=status.HTTP_409_CONFLICT, message=str(e))
    except HashingError:
        logger.exception("Password hashing failed for %s", payload.email)
        return render_page(
            "add_user",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            message="Unable to register user.",
        )

    return render_login("Registration Complete. Please login to continue.")

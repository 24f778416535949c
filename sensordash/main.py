# sensordash/main.py
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import logging

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import PlainTextResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from sensordash.core.config import get_settings
from sensordash.core.errors import AdminRequired, AuthenticationRequired, SensorDashError
from sensordash.core.sessions import build_session_store
from sensordash.core.views import render_login, render_page
from sensordash.database import create_db_and_tables, engine, seed_roles

# Import models so SQLModel metadata is populated before create_all()
from sensordash.models import user as _user_models  # noqa: F401
from sensordash.models import access_key as _access_key_models  # noqa: F401
from sensordash.models import reading as _reading_models  # noqa: F401
from sensordash.models import session as _session_models  # noqa: F401

# Routers
from sensordash.routers.auth import router as auth_router
from sensordash.routers.users import router as users_router
from sensordash.routers.access_keys import router as access_keys_router
from sensordash.routers.readings import router as readings_router

settings = get_settings()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Verify DB connectivity, create tables, seed roles.
      - Drop sessions that expired while the server was down.
    """
    logger.info("Startup: connecting to database...")
    try:
        create_db_and_tables()
        seed_roles()
        logger.info("Startup: DB connection OK, tables verified.")
        with Session(engine) as session:
            purged = app.state.session_store.purge_expired(session)
        if purged:
            logger.info(f"Startup: removed {purged} expired sessions.")
    except Exception as e:
        logger.error(f"Startup: DB connection FAILED: {e}")
        raise
    yield


app = FastAPI(
    title=settings.PROJECT_NAME,
    version="0.1.0",
    lifespan=lifespan,
)

app.state.session_store = build_session_store(settings)


# --- Request logging (development only) ---


@app.middleware("http")
async def log_requests(request: Request, call_next):
    response = await call_next(request)
    if settings.is_development:
        now = datetime.now(timezone.utc).isoformat()
        user = getattr(request.state, "user", None)
        user_email = user.email if user is not None else None
        logger.info(f"[{now}] {request.method} {request.url} by {user_email}")
    return response


# --- Error handling ---
#
# Gate failures render the login page (HTTP 200), never a bare 401/403.
# Store failures are logged and answered with a generic 500.


@app.exception_handler(AuthenticationRequired)
async def authentication_required_handler(request: Request, exc: AuthenticationRequired):
    return render_login(str(exc))


@app.exception_handler(AdminRequired)
async def admin_required_handler(request: Request, exc: AdminRequired):
    return render_login(str(exc))


@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc.__class__.__name__}")
    return PlainTextResponse("Unable to retrieve data from database.", status_code=500)


@app.exception_handler(SensorDashError)
async def app_error_handler(request: Request, exc: SensorDashError):
    logger.error(f"Unhandled {exc.__class__.__name__} on {request.method} {request.url.path}: {exc}")
    return PlainTextResponse("Internal server error.", status_code=500)


@app.exception_handler(StarletteHTTPException)
async def not_found_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return render_page("404", status_code=404, message=None)
    return await http_exception_handler(request, exc)


app.include_router(auth_router)
app.include_router(users_router)
app.include_router(access_keys_router)
app.include_router(readings_router)


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "sensordash"}

# sensordash/database.py
from sqlalchemy.engine import make_url
from sqlmodel import SQLModel, create_engine, Session, select

from sensordash.core.config import get_settings
from sensordash.core.roles import Role

settings = get_settings()

# ---------------------------------------------------------
# Engine setup
#
# - pool_pre_ping=True : validate connections before using them
# - statement timeout  : every query is bounded; a stuck query fails
#                        the request instead of holding a connection
#
# PostgreSQL gets `-c statement_timeout=<ms>` as a connection option.
# sqlite (tests / local dev) only supports a busy timeout.
# ---------------------------------------------------------


def build_engine(db_url: str):
    url = make_url(db_url)
    backend = url.get_backend_name()

    if backend == "sqlite":
        return create_engine(
            db_url,
            echo=False,
            connect_args={
                "check_same_thread": False,
                "timeout": settings.DB_STATEMENT_TIMEOUT_MS / 1000,
            },
        )

    # Append sslmode if configured and not already present
    if backend == "postgresql" and settings.DATABASE_SSLMODE and "sslmode=" not in db_url:
        if "?" in db_url:
            db_url = db_url + f"&sslmode={settings.DATABASE_SSLMODE}"
        else:
            db_url = db_url + f"?sslmode={settings.DATABASE_SSLMODE}"

    connect_args = {}
    if backend == "postgresql":
        connect_args["options"] = f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}"

    return create_engine(
        db_url,
        echo=False,        # set to True if you want to debug SQL queries
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        max_overflow=settings.DB_MAX_OVERFLOW,
        connect_args=connect_args,
    )


engine = build_engine(settings.DATABASE_URL)


def create_db_and_tables() -> None:
    """
    Create all tables defined in SQLModel metadata if they do not exist.

    This is called once on application startup.
    """
    SQLModel.metadata.create_all(engine)


def seed_roles() -> None:
    """
    Make sure the `roles` table holds exactly the rows `Role` maps to.
    """
    from sensordash.models.user import RoleRow

    with Session(engine) as session:
        existing = {row.role_id for row in session.exec(select(RoleRow)).all()}
        for role in Role:
            if role.id not in existing:
                session.add(RoleRow(role_id=role.id, role=role.value))
        session.commit()


def get_session():
    """
    FastAPI dependency that yields a SQLModel Session.

    One session per request; the connection goes back to the pool
    when the request finishes.

    Usage:

        from fastapi import Depends

        @router.get("/example")
        def example_endpoint(session: Session = Depends(get_session)):
            ...
    """
    with Session(engine) as session:
        yield session

import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Settings are read at import time; point them at a throwaway database
# before anything from sensordash is imported.
_TMP_DIR = Path(tempfile.mkdtemp(prefix="sensordash-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_TMP_DIR / 'test.db'}"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["ENVIRONMENT"] = "test"
os.environ["SESSION_BACKEND"] = "database"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel

from sensordash.core.roles import Role
from sensordash.core.security import hash_password
from sensordash.core.sessions import MemorySessionStore
from sensordash.database import engine, seed_roles
from sensordash.main import app
from sensordash.models.reading import Address, Sensor, SensorUser, Temperature
from sensordash.repositories.user_repo import UserRepository

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"
USER_EMAIL = "user@example.com"
USER_PASSWORD = "user-password"
LONELY_EMAIL = "lonely@example.com"
LONELY_PASSWORD = "lonely-password"

BASE_TIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def reset_db():
    SQLModel.metadata.drop_all(engine)
    SQLModel.metadata.create_all(engine)
    seed_roles()
    yield


@pytest.fixture
def db():
    with Session(engine) as session:
        yield session


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def memory_client(monkeypatch):
    """Same app, sessions kept in process memory."""
    monkeypatch.setattr(app.state, "session_store", MemorySessionStore(timedelta(days=30)))
    with TestClient(app) as c:
        yield c


@pytest.fixture
def https_client():
    with TestClient(app, base_url="https://testserver") as c:
        yield c


def make_user(db: Session, email: str, password: str, role: Role = Role.USER) -> int:
    return UserRepository().add_user(
        db,
        email=email,
        phone="555-0100",
        role=role,
        password_digest=hash_password(password),
    )


@pytest.fixture
def users(db):
    """admin, a user with two sensors, a user with none."""
    return {
        "admin": make_user(db, ADMIN_EMAIL, ADMIN_PASSWORD, Role.ADMIN),
        "user": make_user(db, USER_EMAIL, USER_PASSWORD, Role.USER),
        "lonely": make_user(db, LONELY_EMAIL, LONELY_PASSWORD, Role.USER),
    }


@pytest.fixture
def readings(db, users):
    """
    Two devices, three thermometers:
      pi 1: kitchen (t-kitchen), bedroom (t-bedroom)
      pi 2: garage (t-garage)

    `user` is assigned kitchen and bedroom. Every thermometer gets five
    readings one minute apart, interleaved across thermometers.
    """
    pi1 = Address(pi_id=1, hostname="pi-one", address="10.0.0.11")
    pi2 = Address(pi_id=2, hostname="pi-two", address="10.0.0.12")
    db.add(pi1)
    db.add(pi2)
    db.commit()
    db.refresh(pi1)
    db.refresh(pi2)

    kitchen = Sensor(thermometer_id="t-kitchen", address_id=pi1.address_id, place="kitchen")
    bedroom = Sensor(thermometer_id="t-bedroom", address_id=pi1.address_id, place="bedroom")
    garage = Sensor(thermometer_id="t-garage", address_id=pi2.address_id, place="garage")
    for sensor in (kitchen, bedroom, garage):
        db.add(sensor)
    db.commit()
    for sensor in (kitchen, bedroom, garage):
        db.refresh(sensor)

    db.add(SensorUser(sensor_id=kitchen.sensor_id, user_id=users["user"]))
    db.add(SensorUser(sensor_id=bedroom.sensor_id, user_id=users["user"]))
    db.commit()

    minute = 0
    for i in range(5):
        for offset, thermometer in enumerate(("t-kitchen", "t-bedroom", "t-garage")):
            db.add(
                Temperature(
                    thermometer_id=thermometer,
                    capture_time=BASE_TIME + timedelta(minutes=minute),
                    temperature=20.0 + offset + i / 10,
                )
            )
            minute += 1
    db.commit()
    return {"kitchen": kitchen, "bedroom": bedroom, "garage": garage}


def login(client: TestClient, email: str, password: str):
    return client.post(
        "/login",
        data={"email": email, "password": password},
        follow_redirects=False,
    )

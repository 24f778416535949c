from datetime import datetime, timezone

import pytest
from argon2 import PasswordHasher
from sqlmodel import select

from sensordash.core.errors import ConflictError, InvalidRoleError, NotFoundError
from sensordash.core.roles import Role
from sensordash.core.security import check_needs_rehash, hash_password, verify_password
from sensordash.models.access_key import AccessKey
from sensordash.models.user import RoleRow, User
from sensordash.repositories.access_key_repo import AccessKeyRepository
from sensordash.repositories.reading_repo import ReadingRepository
from sensordash.repositories.user_repo import UserRepository
from sensordash.schemas.reading import ReadingRead
from sensordash.services.access_key_service import AccessKeyService
from sensordash.services.reading_service import ReadingService

from conftest import (
    ADMIN_EMAIL,
    BASE_TIME,
    USER_EMAIL,
    USER_PASSWORD,
)

reading_repo = ReadingRepository()
user_repo = UserRepository()
key_service = AccessKeyService(AccessKeyRepository(), user_repo)


# -------- Readings --------


@pytest.mark.parametrize("count", [1, 3, 7, 15, 50])
def test_latest_is_bounded_and_newest_first(db, readings, count):
    rows = reading_repo.latest(db, count)

    assert len(rows) == min(count, 15)
    times = [r.capture_time for r in rows]
    assert times == sorted(times, reverse=True)
    assert rows[0].thermometer_id == "t-garage"
    assert rows[0].place == "garage"


def test_latest_defaults_to_one(db, readings):
    assert len(reading_repo.latest(db)) == 1


def test_latest_per_sensor(db, readings):
    rows = reading_repo.latest_per_sensor(db)

    assert [(r.pi_id, r.place) for r in rows] == [
        (1, "bedroom"),
        (1, "kitchen"),
        (2, "garage"),
    ]
    # highest temperature_id per thermometer (15 rows inserted round-robin)
    assert {r.thermometer_id: r.temperature_id for r in rows} == {
        "t-kitchen": 13,
        "t-bedroom": 14,
        "t-garage": 15,
    }
    assert rows[2].hostname == "pi-two"
    assert rows[2].address == "10.0.0.12"


def test_for_user_only_returns_assigned_sensors(db, users, readings):
    rows = reading_repo.for_user(db, users["user"], 10)

    assert len(rows) == 10
    assert {r.place for r in rows} == {"kitchen", "bedroom"}
    times = [r.capture_time for r in rows]
    assert times == sorted(times, reverse=True)


def test_for_user_respects_count(db, users, readings):
    rows = reading_repo.for_user(db, users["user"], 4)
    assert [r.place for r in rows] == ["bedroom", "kitchen", "bedroom", "kitchen"]


def test_for_user_without_sensors_is_empty(db, users, readings):
    assert reading_repo.for_user(db, users["lonely"], 10) == []
    assert reading_repo.for_user(db, 9999, 10) == []


@pytest.mark.parametrize(
    "count, expected",
    [(None, 10), ("abc", 10), ("5", 5), (0, 1), (-5, 1), (10**9, 10000), (25, 25)],
)
def test_clamp_count(count, expected):
    assert ReadingService.clamp_count(count, 10) == expected


def test_graph_series_groups_by_place():
    rows = [
        ReadingRead(temperature_id=3, thermometer_id="a", place="attic",
                    capture_time=datetime(2024, 1, 1, 10, 2, tzinfo=timezone.utc), temperature=3.0),
        ReadingRead(temperature_id=2, thermometer_id="b", place="basement",
                    capture_time=datetime(2024, 1, 1, 10, 1, tzinfo=timezone.utc), temperature=2.0),
        ReadingRead(temperature_id=1, thermometer_id="a", place="attic",
                    capture_time=datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc), temperature=1.0),
        ReadingRead(temperature_id=0, thermometer_id="c", place=None,
                    capture_time=datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc), temperature=0.5),
    ]
    series = ReadingService.graph_series(rows)

    assert list(series) == ["attic", "basement", "c"]
    assert [p.y for p in series["attic"]] == [3.0, 1.0]
    assert series["basement"][0].x == datetime(2024, 1, 1, 10, 1, tzinfo=timezone.utc)


def test_reading_times_without_offset_are_read_as_utc():
    row = ReadingRead(temperature_id=1, thermometer_id="a", place="attic",
                      capture_time=datetime(2024, 1, 1, 10, 0), temperature=1.0)
    assert row.capture_time == datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)


# -------- Users --------


def test_add_then_validate_round_trip(db):
    user_id = user_repo.add_user(db, "new@example.com", "555", "admin", hash_password("s3cret"))

    user = user_repo.validate_user(db, "new@example.com", "s3cret")
    assert user is not None
    assert user.user_id == user_id
    assert user.email == "new@example.com"
    assert user.role is Role.ADMIN
    assert "password" not in user.model_dump()


def test_validate_user_wrong_password_is_none(db, users):
    assert user_repo.validate_user(db, USER_EMAIL, "nope") is None
    assert user_repo.validate_user(db, USER_EMAIL, "") is None


def test_validate_user_unknown_email(db, users):
    with pytest.raises(NotFoundError):
        user_repo.validate_user(db, "ghost@example.com", USER_PASSWORD)


def test_validate_user_upgrades_outdated_hash(db):
    weak = PasswordHasher(time_cost=1, memory_cost=64, parallelism=1)
    user_id = user_repo.add_user(db, "old@example.com", None, Role.USER, weak.hash("s3cret"))
    old_digest = user_repo.get_by_id(db, user_id).password
    assert check_needs_rehash(old_digest)

    assert user_repo.validate_user(db, "old@example.com", "s3cret") is not None

    new_digest = user_repo.get_by_id(db, user_id).password
    assert new_digest != old_digest
    assert not check_needs_rehash(new_digest)
    assert verify_password(new_digest, "s3cret")


def test_validate_user_keeps_current_hash(db, users):
    before = user_repo.get_by_email(db, USER_EMAIL).password
    user_repo.validate_user(db, USER_EMAIL, USER_PASSWORD)
    assert user_repo.get_by_email(db, USER_EMAIL).password == before


def test_validate_user_with_unrecognized_role(db):
    db.add(RoleRow(role_id=3, role="guest"))
    db.commit()
    guest = User(email="guest@example.com", role_id=3, password=hash_password("guest-pw"))
    db.add(guest)
    db.commit()

    user = user_repo.validate_user(db, "guest@example.com", "guest-pw")
    assert user is not None
    assert user.role is None
    assert not guest.is_admin


def test_password_is_stored_hashed(db, users):
    stored = user_repo.get_by_email(db, USER_EMAIL)
    assert stored.password != USER_PASSWORD
    assert verify_password(stored.password, USER_PASSWORD)


def test_add_user_duplicate_email_conflicts(db, users):
    with pytest.raises(ConflictError):
        user_repo.add_user(db, USER_EMAIL, None, Role.USER, hash_password("x"))

    # the session is still usable after the failed insert
    assert user_repo.get_by_email(db, USER_EMAIL) is not None


@pytest.mark.parametrize("role", ["root", 7, None])
def test_add_user_rejects_unknown_role(db, role):
    with pytest.raises(InvalidRoleError):
        user_repo.add_user(db, "x@example.com", None, role, "digest")
    assert user_repo.get_by_email(db, "x@example.com") is None


def test_add_user_accepts_role_id(db):
    user_id = user_repo.add_user(db, "id@example.com", None, 2, "digest")
    assert user_repo.get_by_id(db, user_id).role is Role.USER


def test_list_with_roles(db, users):
    listing = user_repo.list_with_roles(db)
    assert [(u.email, u.role) for u in listing][:2] == [
        (ADMIN_EMAIL, "admin"),
        (USER_EMAIL, "user"),
    ]


# -------- Access keys --------


def test_add_access_key_generates_key(db, users):
    creation_time = key_service.add_access_key(db, USER_EMAIL)

    assert isinstance(creation_time, datetime)
    keys = db.exec(select(AccessKey)).all()
    assert len(keys) == 1
    assert keys[0].owner_id == users["user"]
    assert len(keys[0].key) == 100
    assert keys[0].status == "active"


def test_add_access_key_uses_given_key(db, users):
    key_service.add_access_key(db, USER_EMAIL, "my-own-key")
    listing = key_service.list_keys(db)

    assert len(listing) == 1
    assert listing[0].key == "my-own-key"
    assert listing[0].email == USER_EMAIL
    assert listing[0].role == "user"


def test_add_access_key_blank_key_is_generated(db, users):
    key_service.add_access_key(db, USER_EMAIL, "   ")
    assert len(key_service.list_keys(db)[0].key) == 100


def test_add_access_key_unknown_email(db, users):
    with pytest.raises(NotFoundError):
        key_service.add_access_key(db, "ghost@example.com")
    assert db.exec(select(AccessKey)).all() == []


def test_reading_times_come_back_as_datetimes(db, readings):
    row = reading_repo.latest(db, 1)[0]
    assert isinstance(row.capture_time, datetime)
    assert row.capture_time > BASE_TIME


def test_role_property_follows_role_id(db, users):
    admin = db.get(User, users["admin"])
    assert admin.is_admin
    assert db.get(User, users["user"]).role is Role.USER

# create_admin.py
import argparse
import getpass

from sqlmodel import Session

from sensordash.core.errors import ConflictError
from sensordash.core.roles import Role
from sensordash.core.security import hash_password
from sensordash.database import create_db_and_tables, engine, seed_roles
from sensordash.models import access_key as _access_key_models  # noqa: F401
from sensordash.models import reading as _reading_models  # noqa: F401
from sensordash.models import session as _session_models  # noqa: F401
from sensordash.repositories.user_repo import UserRepository


def main():
    parser = argparse.ArgumentParser(description="Create the first admin account.")
    parser.add_argument("email")
    parser.add_argument("--phone", default=None)
    args = parser.parse_args()

    password = getpass.getpass("Password: ")
    if password != getpass.getpass("Confirm password: "):
        raise SystemExit("Password does not match.")

    create_db_and_tables()
    seed_roles()

    with Session(engine) as session:
        try:
            user_id = UserRepository().add_user(
                session,
                email=args.email,
                phone=args.phone,
                role=Role.ADMIN,
                password_digest=hash_password(password),
            )
        except ConflictError as e:
            raise SystemExit(str(e))

    print(f"Admin {args.email} created with id {user_id}.")


if __name__ == "__main__":
    main()

"""
Create or reset a user (e.g. a second admin). Run from project root:
  python -m dockmaster.scripts.create_user USERNAME PASSWORD [role] [--reset]
Example:
  python -m dockmaster.scripts.create_user ops your-secure-password admin
"""
import argparse
import sys

from dockmaster.core.config import settings
from dockmaster.core.database import build_engine, build_session_factory, create_tables
from dockmaster.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    hash_password,
)
from dockmaster.schemas.auth import StoredUser
from dockmaster.services.credentials import CredentialStore


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a Dockmaster user (no registration UI).")
    parser.add_argument("username", help=f"Username (1-{USERNAME_MAX_LEN} chars)")
    parser.add_argument("password", help=f"Password ({PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} chars)")
    parser.add_argument("role", nargs="?", default="user", choices=["user", "admin"])
    parser.add_argument("--reset", action="store_true", help="Overwrite password and role if the user exists")
    args = parser.parse_args(argv)

    username = args.username.strip()
    if not username or len(username) > USERNAME_MAX_LEN:
        print("Invalid username length.", file=sys.stderr)
        return 1
    if not PASSWORD_MIN_LEN <= len(args.password) <= PASSWORD_MAX_LEN:
        print(f"Password must be {PASSWORD_MIN_LEN}-{PASSWORD_MAX_LEN} characters.", file=sys.stderr)
        return 1

    engine = build_engine(settings.DATABASE_URL)
    try:
        create_tables(engine)
        store = CredentialStore(build_session_factory(engine))
        password_hash = hash_password(args.password, rounds=settings.BCRYPT_ROUNDS)
        if args.reset:
            store.upsert(StoredUser(username=username, password_hash=password_hash, role=args.role))
            print(f"Saved user '{username}' with role '{args.role}'.")
            return 0
        if not store.create_if_absent(username, password_hash, args.role):
            print(f"User '{username}' already exists (use --reset to overwrite).", file=sys.stderr)
            return 1
        print(f"Created user '{username}' with role '{args.role}'.")
        return 0
    finally:
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
